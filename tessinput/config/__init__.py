"""Loading of the generator settings.

The layering is, with later sources overriding earlier ones:

1.  Default values defined in the Pydantic schemas.
2.  Environment variables prefixed with ``TESSINPUT_`` or a ``.env`` file.
3.  Values from an optional YAML configuration file.
4.  Explicit keyword overrides, e.g. from the command line.
"""

from pathlib import Path

from tessinput.config.schemas import (
    FontSpec,
    FontStyle,
    GeneratorSettings,
    RenderConfig,
    parse_length_spec,
)

CONFIG_PATH = Path(__file__).parent / "config.yaml"
"""An example configuration shipped with the package."""


def load_config(config_path=None, **overrides) -> GeneratorSettings:
    """Builds validated `GeneratorSettings` from all configuration sources.

    Args:
        config_path (str or Path, optional): A YAML file with settings.
        **overrides: Explicit values. Keys whose value is None are ignored so
            that unset command line options do not mask other sources.

    Returns:
        The validated settings.

    Raises:
        FileNotFoundError: If `config_path` is given but does not exist.
        pydantic.ValidationError: If any value is invalid.
    """
    kwargs = {k: v for k, v in overrides.items() if v is not None}
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        kwargs["yaml_file"] = config_path
    return GeneratorSettings(**kwargs)


__all__ = [
    "CONFIG_PATH",
    "FontSpec",
    "FontStyle",
    "GeneratorSettings",
    "RenderConfig",
    "load_config",
    "parse_length_spec",
]
