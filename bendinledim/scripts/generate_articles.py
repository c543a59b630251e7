# python -m bendinledim.scripts.generate_articles --count 5 [--featured] [--editors-pick]
import argparse

from bendinledim import create_app
from bendinledim.errors import BlogError
from bendinledim.generation import FlagPolicy, chat_from_config, generate_articles
from bendinledim.repository import get_repository


def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--count", type=int, default=5)
    p.add_argument("--featured", action="store_true")
    p.add_argument("--editors-pick", action="store_true")
    args = p.parse_args(argv)
    if not 1 <= args.count <= 20:
        p.error("--count must be between 1 and 20")

    app = create_app()
    with app.app_context():
        try:
            result = generate_articles(
                get_repository(),
                chat_from_config(app.config),
                count=args.count,
                flags=FlagPolicy(featured=args.featured, editors_pick=args.editors_pick),
            )
        except BlogError as e:
            raise SystemExit(f"generation failed: {e.message}") from e
        for a in result.articles:
            print("+", a.slug)
        for title in result.skipped:
            print("= duplicate:", title)
        print(f"Created {result.count} article(s)")


if __name__ == "__main__":
    main()
