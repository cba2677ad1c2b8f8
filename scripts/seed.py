"""Seed the blog database with sample posts."""
import argparse
import asyncio
import time

from blog.database import Base, async_session, engine
from blog.models import Post

SAMPLE_POSTS = [
    {
        "slug": "my-first-post",
        "title": "My First Post",
        "markdown": (
            "# This is my first post\n\n"
            "Isn't it great?\n"
        ),
    },
    {
        "slug": "90s-mixtape",
        "title": "A Mixtape I Made Just For You",
        "markdown": (
            "# 90s Mixtape\n\n"
            "- I wish (Skee-Lo)\n"
            "- This Is How We Do It (Montell Jordan)\n"
            "- Everlong (Foo Fighters)\n"
            "- Ms. Jackson (Outkast)\n"
            "- Interstate Love Song (Stone Temple Pilots)\n"
            "- Killing Me Softly With His Song (Fugees, Ms. Lauryn Hill)\n"
            "- Just a Friend (Biz Markie)\n"
            "- The Man Who Sold The World (Nirvana)\n"
            "- Semi-Charmed Life (Third Eye Blind)\n"
            "- ...Baby One More Time (Britney Spears)\n"
            "- Better Man (Pearl Jam)\n"
            "- It's All Coming Back to Me Now (Céline Dion)\n"
            "- This Kiss (Faith Hill)\n"
            "- Fly Away (Lenny Kravitz)\n"
            "- Scar Tissue (Red Hot Chili Peppers)\n"
            "- Santa Monica (Everclear)\n"
            "- C'mon N' Ride it (Quad City DJ's)\n"
        ),
    },
]


async def seed(extra: int = 0):
    print(f"Seeding: {len(SAMPLE_POSTS)} sample posts + {extra} generated")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        for data in SAMPLE_POSTS:
            session.add(Post(**data))
        for i in range(extra):
            session.add(Post(
                slug=f"generated-post-{i:04d}",
                title=f"Generated Post {i}",
                markdown=f"# Generated post {i}\n\n" + "Lorem ipsum dolor sit amet. " * 10,
            ))
        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"Seeding complete in {elapsed:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--extra", type=int, default=0, help="Number of generated posts to add")
    args = parser.parse_args()
    asyncio.run(seed(extra=args.extra))


if __name__ == "__main__":
    main()
