#!/usr/bin/env python3
"""
Outline editing example for DazzleForest.

This example demonstrates:
- Building an outline from Element instances
- Moving sections around with before / after / under
- How a failed edit leaves the outline untouched
- Printing the result as an indented list and as JSON
"""

import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzleforest import (
    Element,
    ElementNotPresentError,
    Tree,
    get_forest_stats,
    traverse_forest,
    tree_to_json,
)


def show(tree):
    for element, depth in traverse_forest(tree):
        print(f"{'  ' * depth}- {element.title}")


def main():
    intro = Element(title="Introduction")
    usage = Element(title="Usage")
    install = Element(title="Installation")
    faq = Element(title="FAQ")

    outline = Tree([intro, usage, faq])
    outline.add(install, before=usage)
    outline.add(Element(title="Quick start"), under=usage)
    outline.add(Element(title="Configuration"), under=usage)

    print("Initial outline:")
    show(outline)

    # Move the FAQ under Usage, then pull Installation into the intro
    outline.move(faq, under=usage)
    outline.move(install, under=intro)

    print("\nAfter moving sections:")
    show(outline)

    # Moving a section underneath itself is rejected and nothing changes
    try:
        outline.move(usage, under=faq)
    except ElementNotPresentError as exc:
        print(f"\nRejected edit: {exc}")

    # Split the Usage chapter out into its own document
    usage_doc = outline.prune(usage)
    print("\nDetached document:")
    show(usage_doc)

    stats = get_forest_stats(outline)
    print(f"\nRemaining outline: {stats['total_elements']} sections, "
          f"max depth {stats['max_depth']}")
    print(tree_to_json(outline, indent=2))


if __name__ == "__main__":
    main()
