# sdk/catalog_client.py
import json
from typing import Any, Dict, Iterable, Optional, Union

import httpx
import requests
from rich import print


class CatalogClient:
    def __init__(self, base_url: str = "http://localhost:3000", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def index(self):
        r = self.session.get(self._url("/"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def health(self) -> bool:
        r = self.session.get(self._url("/health"), timeout=self.timeout)
        return r.status_code == 200

    # Resources
    def list_resources(self, category: Optional[str] = None, min_price: Optional[float] = None,
                       sort: Optional[str] = None, fields: Optional[Union[str, Iterable[str]]] = None):
        params = {}
        if category:
            params["category"] = category
        if min_price is not None:
            params["minPrice"] = str(min_price)
        if sort:
            params["sort"] = sort
        if fields:
            params["fields"] = fields if isinstance(fields, str) else ",".join(fields)
        r = self.session.get(self._url("/api/resources"), params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_resource(self, resource_id: str):
        r = self.session.get(self._url(f"/api/resources/{resource_id}"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def create_resource(self, name: str, price: float, category: str, **extra: Any):
        payload = {"name": name, "price": price, "category": category, **extra}
        r = self.session.post(self._url("/api/resources"), json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def replace_resource(self, resource_id: str, name: str, price: float, category: str, **extra: Any):
        payload = {"name": name, "price": price, "category": category, **extra}
        r = self.session.put(self._url(f"/api/resources/{resource_id}"), json=payload, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def patch_resource(self, resource_id: str, fields: Dict[str, Any]):
        r = self.session.patch(self._url(f"/api/resources/{resource_id}"), json=fields, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_resource(self, resource_id: str) -> None:
        r = self.session.delete(self._url(f"/api/resources/{resource_id}"), timeout=self.timeout)
        r.raise_for_status()

    # Async fetch (example)
    async def get_resource_async(self, resource_id: str):
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.get(self._url(f"/api/resources/{resource_id}"))
            r.raise_for_status()
            return r.json()


def error_message(exc: requests.exceptions.HTTPError) -> str:
    """Pull the API's ``error`` text out of a failed response, if there is one."""
    try:
        return exc.response.json().get("error", str(exc))
    except ValueError:
        return str(exc)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="catalog-api client")
    parser.add_argument("--base-url", default="http://127.0.0.1:3000")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lr = subparsers.add_parser("list", help="List resources")
    lr.add_argument("--category", help="Only this category")
    lr.add_argument("--min-price", type=float, help="Only resources priced at or above this")
    lr.add_argument("--sort", choices=["price"], help="Sort ascending by price")
    lr.add_argument("--fields", help="Comma separated fields to return")

    gr = subparsers.add_parser("get", help="Get a resource by id")
    gr.add_argument("--id", required=True)

    cr = subparsers.add_parser("create", help="Create a resource")
    cr.add_argument("--name", required=True)
    cr.add_argument("--price", type=float, required=True)
    cr.add_argument("--category", required=True)

    rr = subparsers.add_parser("replace", help="Replace a resource")
    rr.add_argument("--id", required=True)
    rr.add_argument("--name", required=True)
    rr.add_argument("--price", type=float, required=True)
    rr.add_argument("--category", required=True)

    pr = subparsers.add_parser("patch", help="Update some fields of a resource")
    pr.add_argument("--id", required=True)
    pr.add_argument("--set", required=True, help='JSON object, e.g. \'{"price": 2}\'')

    dr = subparsers.add_parser("delete", help="Delete a resource")
    dr.add_argument("--id", required=True)

    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url)

    try:
        if args.command == "list":
            print(c.list_resources(args.category, args.min_price, args.sort, args.fields))
        elif args.command == "get":
            print(c.get_resource(args.id))
        elif args.command == "create":
            print(c.create_resource(args.name, args.price, args.category))
        elif args.command == "replace":
            print(c.replace_resource(args.id, args.name, args.price, args.category))
        elif args.command == "patch":
            print(c.patch_resource(args.id, json.loads(args.set)))
        elif args.command == "delete":
            c.delete_resource(args.id)
            print(f"[green]deleted {args.id}[/green]")
    except requests.exceptions.HTTPError as e:
        print(f"[red]{error_message(e)}[/red]")
        raise SystemExit(1)
