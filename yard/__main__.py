import logging
import sys

import yard


def run(src: str) -> bool:
    print(f"INPUT:  {src}")
    sys.stdout.write("OUTPUT: ")
    try:
        yard.translate(src, sys.stdout)
    except yard.ExpressionError as e:
        logging.getLogger("yard").debug("translation failed: %s (pos %s)", e, e.pos)
        return False
    finally:
        sys.stdout.flush()
    return True


def prompt() -> int:
    while True:
        try:
            src = input("% ")
        except EOFError:
            print()
            break
        run(src)
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(name)s - %(levelname)s - %(message)s",
    )
    args = sys.argv[1:] if argv is None else argv
    if not args:
        return prompt()
    return 0 if run(args[-1]) else 1


if __name__ == "__main__":
    sys.exit(main())
