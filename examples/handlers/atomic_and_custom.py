"""Embeds inside a numbered list, plus an application-defined block type."""

from bloques import AtomicResult, BlockHandlerRegistryBuilder, block_handler, render_text


def render_image(block, entity_map):
    """Atomic handler: report which list the image replaced."""
    entity = entity_map[str(block.entity_ranges[0].key)]
    return AtomicResult(f"[image {entity.data['src']}]", block.data.get("listType"))


@block_handler("callout")
def render_callout(block, params):
    return f"(!) {block.text}"


registry = BlockHandlerRegistryBuilder().register(render_callout()).build()

raw = {
    "blocks": [
        {"key": "a", "type": "ordered-list-item", "text": "Open the box"},
        {
            "key": "img",
            "type": "atomic",
            "text": " ",
            "entityRanges": [{"offset": 0, "length": 1, "key": 0}],
            "data": {"listType": "ordered-list-item"},
        },
        {"key": "b", "type": "ordered-list-item", "text": "Plug it in"},
        {"key": "c", "type": "callout", "text": "Mind the cable"},
        {"key": "d", "type": "ordered-list-item", "text": "Start over at one"},
    ],
    "entityMap": {"0": {"type": "IMAGE", "mutability": "IMMUTABLE", "data": {"src": "box.png"}}},
}

print(render_text(raw, atomic_handler=render_image, custom_block_handler=registry))
