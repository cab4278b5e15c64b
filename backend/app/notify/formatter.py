"""
Email body rendering: two tables (Stack Overflow questions, Reddit posts).

Pure functions; the same input always yields the same string.
"""

from html import escape

from app.search.schemas import ResultSource, SearchResult

TABLE_OPEN = '<table border="1" cellpadding="5" cellspacing="0">'


def partition_results(results: list[SearchResult]) -> tuple[list[SearchResult], list[SearchResult]]:
    """Split a combined list by source tag, keeping relative order."""
    qa = [r for r in results if r.source == ResultSource.QA]
    social = [r for r in results if r.source == ResultSource.SOCIAL]
    return qa, social


def _link(href: str, text: str) -> str:
    return f'<a href="{escape(href)}">{escape(text)}</a>'


def _qa_row(item: SearchResult) -> str:
    tags = ", ".join(item.tags) if item.tags else "No tags"
    owner = _link(item.author_url, item.author) if item.author_url else escape(item.author)
    return (
        "<tr>"
        f"<td>{escape(item.title)}</td>"
        f"<td>{escape(tags)}</td>"
        f"<td>{owner}</td>"
        f"<td>{_link(item.url, 'View Question')}</td>"
        "</tr>"
    )


def _social_row(post: SearchResult) -> str:
    return (
        "<tr>"
        f"<td>{escape(post.title)}</td>"
        f"<td>{escape(post.community_label)}</td>"
        f"<td>{escape(post.author)}</td>"
        f"<td>{_link(post.url, 'View Post')}</td>"
        "</tr>"
    )


def render_results_html(qa_results: list[SearchResult], social_results: list[SearchResult]) -> str:
    parts = [
        "<h2>Search Results</h2>",
        "<h3>StackOverflow Questions</h3>",
        TABLE_OPEN,
        "<thead><tr><th>Title</th><th>Tags</th><th>Owner</th><th>Link</th></tr></thead>",
        "<tbody>",
        *(_qa_row(item) for item in qa_results),
        "</tbody></table>",
        "<h3>Reddit Posts</h3>",
        TABLE_OPEN,
        "<thead><tr><th>Title</th><th>Subreddit</th><th>Author</th><th>Link</th></tr></thead>",
        "<tbody>",
        *(_social_row(post) for post in social_results),
        "</tbody></table>",
    ]
    return "\n".join(parts)


def render_results_text(qa_results: list[SearchResult], social_results: list[SearchResult]) -> str:
    """Plain-text alternative for mail clients that do not render HTML."""
    lines = ["Search Results", "", "StackOverflow Questions"]
    if not qa_results:
        lines.append("  (none)")
    for item in qa_results:
        tags = ", ".join(item.tags) if item.tags else "No tags"
        lines.append(f"- {item.title} [{tags}] by {item.author}")
        lines.append(f"  {item.url}")
    lines += ["", "Reddit Posts"]
    if not social_results:
        lines.append("  (none)")
    for post in social_results:
        lines.append(f"- {post.title} (r/{post.community_label}) by {post.author}")
        lines.append(f"  {post.url}")
    return "\n".join(lines) + "\n"
