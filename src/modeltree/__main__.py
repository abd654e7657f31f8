from modeltree.cli import app


def _entry() -> None:
    app(prog_name="modeltree")


if __name__ == "__main__":
    _entry()
