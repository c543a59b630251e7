# python -m bendinledim.scripts.bootstrap
from bendinledim import create_app
from bendinledim.bootstrap import bootstrap_defaults
from bendinledim.repository import get_repository


def main():
    app = create_app()
    with app.app_context():
        cats, tags = bootstrap_defaults(get_repository())
        print(f"Categories: {len(cats)}")
        print(f"Tags: {len(tags)}")


if __name__ == "__main__":
    main()
