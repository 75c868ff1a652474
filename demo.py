#!/usr/bin/env python
import os

from sdk.catalog_client import CatalogClient


def main():
    c = CatalogClient(base_url=os.getenv("CATALOG_API_URL", "http://127.0.0.1:3000"))

    # -----------------------------
    # Create
    # -----------------------------
    print("Creating resources...")
    pen = c.create_resource("Pen", 1.5, "office")
    desk = c.create_resource("Desk", 120, "office")
    sample = c.create_resource("Sample", 0, "freebies")
    print(pen)
    print(desk)
    print(sample)

    # -----------------------------
    # Query
    # -----------------------------
    print("\nOffice items from 1.00, cheapest first...")
    print(c.list_resources(category="office", min_price=1, sort="price"))

    print("\nNames and prices only...")
    print(c.list_resources(fields=["name", "price"]))

    # -----------------------------
    # Update
    # -----------------------------
    print("\nPatching the pen's price...")
    print(c.patch_resource(pen["id"], {"price": 2}))
    print(c.get_resource(pen["id"]))

    print("\nReplacing the desk...")
    print(c.replace_resource(desk["id"], "Standing desk", 340, "office"))
    print(c.get_resource(desk["id"]))

    # -----------------------------
    # Delete
    # -----------------------------
    print("\nCleaning up...")
    for created in (pen, desk, sample):
        c.delete_resource(created["id"])
    print(c.list_resources(category="office"))


if __name__ == "__main__":
    main()
