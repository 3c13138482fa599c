import sys

from . import CURVES


def main(names=None):
    """Renders the named curves, or every curve when no name is given."""
    names = list(names) if names else list(CURVES)
    unknown = [name for name in names if name not in CURVES]
    if unknown:
        raise SystemExit(f"Unknown curve(s): {', '.join(unknown)}. Choose from: {', '.join(CURVES)}.")

    for name in names:
        print(f"\nGenerating {name.replace('_', ' ').title()}...")
        CURVES[name]().generate_animation()


if __name__ == "__main__":
    main(sys.argv[1:])
