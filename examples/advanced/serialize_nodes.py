"""Dump render nodes to JSON for snapshots or sending over the wire."""

from bloques import RenderConfig, content_state_from_json, render_blocks, to_json

raw_json = """
{
  "blocks": [
    {"key": "a", "type": "unordered-list-item", "text": "Point", "inlineStyleRanges": [
      {"offset": 0, "length": 5, "style": "BOLD"}
    ]},
    {"key": "b", "type": "paragraph", "text": "Closing words"}
  ],
  "entityMap": {}
}
"""

state = content_state_from_json(raw_json)
config = RenderConfig.from_dict({"unorderedListBullet": "-", "customStyles": {"view_after_list": {"height": 12}}})
print(to_json(render_blocks(state, config), indent=2))
