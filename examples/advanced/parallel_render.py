"""Thread safe: render 1000 content states in parallel with one renderer."""

from concurrent.futures import ThreadPoolExecutor

from bloques import BlockRenderer, ContentBlock, ContentState

states = [
    ContentState(
        blocks=tuple(
            ContentBlock(key=f"{i}-{j}", type="ordered-list-item", text=f"item {j}") for j in range(i % 7 + 1)
        )
    )
    for i in range(1000)
]

renderer = BlockRenderer()
with ThreadPoolExecutor(max_workers=8) as ex:
    results = list(ex.map(renderer.render, states))

print(f"Rendered {len(results)} content states in parallel")
print("Last numbers:", [node.children[-1].number for node in results[-1]])
