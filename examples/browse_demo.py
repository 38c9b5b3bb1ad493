#!/usr/bin/env python3
"""
Demonstration of the bookconnect browsing API.
"""

from bookconnect import BrowserController, Catalog


def main():
    """Run a search, page through it and open a book."""

    catalog = Catalog.sample()
    print(f"Loaded {len(catalog)} books\n")

    controller = BrowserController(catalog, page_size=3)

    # First page of everything
    update = controller.start()
    print("First page:")
    for item in update.items:
        print(f"  {item.title} - {item.author}")
    print(f"  [{update.label}]\n")

    # Reveal the next page
    update = controller.show_more()
    print("After show more:")
    for item in update.items:
        print(f"  {item.title} - {item.author}")
    print(f"  [{update.label}]\n")

    # New search resets the list
    update = controller.submit_search({"title": "dune", "genre": "any", "author": "any"})
    print(f"Search 'dune': {len(controller.match_set)} matches")
    for item in update.items:
        print(f"  {item.title} - {item.author}")
    print(f"  [{update.label}, enabled={update.enabled}]\n")

    # Open the first result
    detail = controller.select(controller.view.ids[0])
    print(f"{detail.title}\n{detail.subtitle}\n\n{detail.description}")

    # Nothing matches
    update = controller.submit_search({"title": "no such book"})
    print(f"\nEmpty result shown as empty state: {update.empty}")


if __name__ == "__main__":
    main()
