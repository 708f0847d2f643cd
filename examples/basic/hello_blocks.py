"""Render a flat Draft.js content state to text and HTML, zero config."""

from bloques import render_html, render_text

raw = {
    "blocks": [
        {"key": "t", "type": "header-one", "text": "Groceries"},
        {"key": "a", "type": "ordered-list-item", "text": "Fruit"},
        {"key": "b", "type": "ordered-list-item", "text": "Apples", "depth": 1},
        {"key": "c", "type": "ordered-list-item", "text": "Pears", "depth": 1},
        {"key": "d", "type": "ordered-list-item", "text": "Bread"},
        {"key": "e", "type": "unstyled", "text": "That's all."},
    ],
    "entityMap": {},
}

print(render_text(raw))
print(render_html(raw))
