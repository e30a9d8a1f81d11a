import fire

from tessinput.run import list_fonts, run


def main():
    """The main entry point for the command-line interface.

    Exposes two commands through `fire`: ``generate`` runs a batch (see
    `tessinput.run.run` for its options) and ``fonts`` lists the installed
    fonts that can be referenced by family name.
    """
    fire.Fire({"generate": run, "fonts": list_fonts})


if __name__ == "__main__":
    main()
