# python -m bendinledim.scripts.check_articles
from bendinledim import create_app
from bendinledim.repository import get_repository


def main():
    app = create_app()
    with app.app_context():
        repo = get_repository()
        empty = repo.empty_content()
        no_image = repo.missing_images()
        print(f"Total: {repo.count_articles()}")
        print(f"Empty content: {len(empty)}")
        for a in empty:
            print("-", a.slug, "|", (a.title or "")[:80])
        print(f"Missing image: {len(no_image)}")
        for a in no_image:
            print("-", a.slug, "|", (a.title or "")[:80])


if __name__ == "__main__":
    main()
