"""HTML-страница со списком содержимого директории."""

from collections.abc import Iterable
from html import escape
from urllib.parse import quote

from file_gateway.storage import DirectoryEntry


def render_listing(title: str, entries: Iterable[DirectoryEntry]) -> str:
    """Построить HTML со ссылками на элементы директории.

    Ссылки относительные: цель ссылки совпадает с именем элемента.
    Заголовок и имена экранируются, поэтому имена файлов
    с HTML-символами не ломают разметку.

    Args:
        title: Путь, показываемый в заголовке
        entries: Элементы директории

    Returns:
        Готовая HTML-страница

    """
    items = "".join(
        '<li><a href="{href}">{text}</a></li>'.format(
            href=escape(quote(entry.display_name), quote=True),
            text=escape(entry.display_name),
        )
        for entry in entries
    )
    return (
        "<html><body>"
        f"<h1>Links for {escape(title)}</h1>"
        f"<ul>{items}</ul>"
        "</body></html>"
    )
