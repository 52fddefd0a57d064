"""Field tag parsing.

A tag is the string stored under the configured tag name in a dataclass
field's metadata::

    @dataclass
    class User:
        name: str = field(metadata={"structs": "user_name"})
        age: int = field(default=0, metadata={"structs": ",omitempty"})
        secret: str = field(default="", metadata={"structs": "-"})

The first comma-separated segment overrides the output key, the rest are
options.
"""

from __future__ import annotations

from typing import Tuple

OMIT_FIELD = "-"

OMITEMPTY = "omitempty"
OMITNESTED = "omitnested"
STRING = "string"
FLATTEN = "flatten"


class TagOptions(frozenset):
    """The option tokens of a tag. Unknown tokens are kept but never consulted."""

    def has(self, opt: str) -> bool:
        return opt in self


def parse_tag(tag: str) -> Tuple[str, TagOptions]:
    """Split a tag into its override name and options.

    Parameters
    ----------
    tag : str
        Raw tag, one of ``""``, ``"name"``, ``"name,opt"``,
        ``"name,opt,opt2"`` or ``",opt"``.

    Returns
    -------
    Tuple[str, TagOptions]
        Override name (empty when the field name should be kept) and options.

    Notes
    -----
    The exclusion marker ``"-"`` is not handled here; callers drop such
    fields before parsing.

    Examples
    --------
    >>> name, opts = parse_tag("id,omitempty")
    >>> name, opts.has("omitempty")
    ('id', True)
    """
    name, *opts = tag.split(",")
    return name, TagOptions(opts)
