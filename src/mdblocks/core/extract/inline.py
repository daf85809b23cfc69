"""Flatten markdown-it inline syntax trees back into canonical Markdown strings"""

import re

from markdown_it.tree import SyntaxTreeNode


LIST_TYPES = {'bullet_list', 'ordered_list'}
BACKTICKS_RE = re.compile(r'`+')

WRAPPERS: dict[str, str] = {
    'em':     '*',
    'strong': '**',
    's':      '~~',
}


def _code_span(code: str) -> str:
    """Wrap code in a backtick run longer than any run it contains."""
    longest = max((len(m) for m in BACKTICKS_RE.findall(code)), default=0)
    ticks = '`' * (longest + 1)
    if longest:
        return f"{ticks} {code} {ticks}"
    return f"{ticks}{code}{ticks}"


def plain_text(node: SyntaxTreeNode) -> str:
    """Concatenate the text content of a subtree, dropping all formatting."""
    if node.type in ('text', 'code_inline', 'html_inline'):
        return node.content
    if node.type in ('softbreak', 'hardbreak'):
        return '\n'
    if node.type == 'image':
        return node.content
    return ''.join(plain_text(c) for c in node.children)


def _render(node: SyntaxTreeNode) -> str:
    t = node.type
    if t == 'text' or t == 'html_inline':
        return node.content
    if t == 'softbreak':
        return '\n'
    if t == 'hardbreak':
        return '  \n'
    if t == 'code_inline':
        return _code_span(node.content)
    if t in WRAPPERS:
        mark = WRAPPERS[t]
        return f"{mark}{render_children(node)}{mark}"
    if t == 'link':
        label = ''.join(plain_text(c) for c in node.children)
        return f"[{label}]({node.attrs.get('href', '')})"
    if t == 'image':
        return f"![{node.content}]({node.attrs.get('src', '')})"
    if t in LIST_TYPES:
        return ''
    if t == 'list_item':
        parts = [_render(c) for c in node.children if c.type not in LIST_TYPES]
        return '\n'.join(p for p in parts if p)
    if t in ('fence', 'code_block'):
        return node.content.rstrip('\n')
    return render_children(node)


def render_children(node: SyntaxTreeNode) -> str:
    return ''.join(_render(c) for c in node.children)


def render_inline(node: SyntaxTreeNode | None) -> str:
    """Render a node's inline content as a trimmed Markdown string."""
    if node is None:
        return ''
    return _render(node).strip()
