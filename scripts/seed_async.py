"""
Load a small, real-world catalog into a running API.

Usage:
    python scripts/seed_async.py --base-url http://localhost:8000
    python scripts/seed_async.py --filler-books 30 --check-guard

Several books are co-authored, so every author that ends up linked can be
used to check that deleting it is refused with 409. The API must be running
and reachable at the provided base URL.
"""

import argparse
import asyncio
import os
import random

import httpx

DEFAULT_BASE_URL = os.getenv("SEED_BASE_URL", "http://localhost:8000")

AUTHORS = {
    "pratchett": ("Terry", "Pratchett", 1948),
    "gaiman": ("Neil", "Gaiman", 1960),
    "king": ("Stephen", "King", 1947),
    "straub": ("Peter", "Straub", 1943),
    "strugatsky_a": ("Arkady", "Strugatsky", 1925),
    "strugatsky_b": ("Boris", "Strugatsky", 1933),
    "le_guin": ("Ursula", "Le Guin", 1929),
    "borges": ("Jorge Luis", "Borges", 1899),
}

# (title, author keys, publisher, edition, published date)
BOOKS = [
    ("Good Omens", ["pratchett", "gaiman"], "Gollancz", "1st", "1990-05-01"),
    ("The Talisman", ["king", "straub"], "Viking", "1st", "1984-11-08"),
    ("Black House", ["king", "straub"], "Random House", "1st", "2001-09-15"),
    ("Roadside Picnic", ["strugatsky_a", "strugatsky_b"], "Macmillan", "1st", "1972-01-01"),
    ("Hard to Be a God", ["strugatsky_a", "strugatsky_b"], None, None, "1964-01-01"),
    ("Mort", ["pratchett"], "Gollancz", "1st", "1987-11-12"),
    ("The Dispossessed", ["le_guin"], "Harper & Row", "1st", "1974-05-01"),
    ("Ficciones", ["borges"], "Sur", None, "1944-01-01"),
]


class Seeder:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self.author_ids: dict[str, int] = {}
        self.book_ids: list[int] = []

    async def add_author(self, key: str) -> None:
        name, surname, birth_year = AUTHORS[key]
        resp = await self.client.post(
            "/authors", json={"name": name, "surname": surname, "birthYear": birth_year}
        )
        resp.raise_for_status()
        self.author_ids[key] = resp.json()["id"]

    async def add_book(self, title, author_ids, publisher=None, edition=None, published=None):
        resp = await self.client.post(
            "/books",
            json={
                "title": title,
                "authorIds": author_ids,
                "publisher": publisher,
                "edition": edition,
                "publishedDate": published,
            },
        )
        resp.raise_for_status()
        self.book_ids.append(resp.json()["id"])

    async def load_catalog(self) -> None:
        for key in AUTHORS:
            await self.add_author(key)
        for title, keys, publisher, edition, published in BOOKS:
            ids = [self.author_ids[k] for k in keys]
            await self.add_book(title, ids, publisher, edition, published)

    async def add_filler(self, count: int, max_authors: int) -> None:
        pool = list(self.author_ids.values())
        for idx in range(count):
            linked = random.sample(pool, k=random.randint(1, min(max_authors, len(pool))))
            await self.add_book(f"Anthology Vol. {idx + 1}", linked, "Seed Press")

    async def check_guard(self) -> bool:
        """Every linked author must be refused deletion while its books exist."""
        ok = True
        for key in sorted({k for _, keys, *_ in BOOKS for k in keys}):
            author_id = self.author_ids[key]
            resp = await self.client.delete(f"/authors/{author_id}")
            if resp.status_code == 409:
                print(f"  {key}: delete refused ({resp.json()['message']})")
            else:
                print(f"  {key}: expected 409, got {resp.status_code}")
                ok = False
        return ok


async def run(args: argparse.Namespace) -> int:
    async with httpx.AsyncClient(base_url=args.base_url, timeout=30.0) as client:
        seeder = Seeder(client)
        await seeder.load_catalog()
        if args.filler_books:
            await seeder.add_filler(args.filler_books, args.max_authors_per_book)
        print(
            f"Seeded {len(seeder.author_ids)} authors and {len(seeder.book_ids)} books "
            f"to {args.base_url}"
        )
        if args.check_guard:
            print("Checking that linked authors cannot be deleted:")
            if not await seeder.check_guard():
                return 1
    return 0


def main():
    parser = argparse.ArgumentParser(description="Load a sample catalog into the API")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="API base URL")
    parser.add_argument(
        "--filler-books", type=int, default=0, help="Extra books with random co-authors"
    )
    parser.add_argument("--max-authors-per-book", type=int, default=3)
    parser.add_argument(
        "--check-guard", action="store_true", help="Try deleting linked authors afterwards"
    )
    raise SystemExit(asyncio.run(run(parser.parse_args())))


if __name__ == "__main__":
    main()
