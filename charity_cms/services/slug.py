"""
Slug derivation.

A slug is the URL-safe identifier of a post, derived from its title. When
the base slug is taken, the next free numeric suffix is appended:
`hello-world`, `hello-world-1`, `hello-world-2`, ... A suffixed slug never
exceeds the column length; the base is cut to make room for the suffix.

Derivation is pure; callers supply the slugs that already share the lookup
prefix (see `PostRepository.slugs_with_prefix`). Under concurrency two
callers can compute the same slug, so the unique index stays the final
arbiter and the post service retries on conflict.
"""

from collections.abc import Iterable
from re import sub

from charity_cms.configs.settings import MAX_SLUG_LENGTH
from charity_cms.errors import ValidationError

# Room for "-" and up to ten digits
SUFFIX_RESERVE = 11

# Slugs a fixed `/posts/...` route would shadow
RESERVED_SLUGS = frozenset({"admin"})


def base_slug(title: str) -> str:
    """
    Normalise a title into its base slug.

    Args:
        title: Post title.

    Returns:
        Lowercase slug made of `[a-z0-9-]` with no leading, trailing or
        repeated hyphens.

    Raises:
        ValidationError: If nothing usable is left after normalisation.
    """
    slug = title.lower()
    slug = sub(r"[^a-z0-9\s-]", "", slug)
    slug = sub(r"\s+", "-", slug)
    slug = sub(r"-+", "-", slug)
    slug = slug[:MAX_SLUG_LENGTH].strip("-")

    if not slug:
        mssg = "Could not generate valid slug from title"
        raise ValidationError(mssg)

    return slug


def with_suffix(base: str, n: int) -> str:
    """Append `-<n>` to `base`, cutting the base so the slug fits the column."""
    suffix = f"-{n}"
    return f"{base[: MAX_SLUG_LENGTH - len(suffix)].rstrip('-')}{suffix}"


def lookup_prefix(base: str) -> str:
    """Prefix shared by `base` and every suffixed form `next_slug` can produce."""
    return base[: MAX_SLUG_LENGTH - SUFFIX_RESERVE].rstrip("-")


def _suffix_of(base: str, slug: str) -> int | None:
    if slug == base:
        return 0
    _, sep, digits = slug.rpartition("-")
    if not sep or not (digits.isascii() and digits.isdigit()):
        return None
    n = int(digits)
    return n if slug == with_suffix(base, n) else None


def next_slug(base: str, existing: Iterable[str]) -> str:
    """
    Return `base` or `base-<n>` so that the result is not in `existing`.

    Only slugs that are exactly `base` or a suffixed form of it count as
    collisions; `hello-world-tour` does not block `hello-world`. Reserved
    slugs that would be shadowed by a fixed route are always taken.
    """
    suffixes = [n for slug in existing if (n := _suffix_of(base, slug)) is not None]
    if base in RESERVED_SLUGS:
        suffixes.append(0)
    if not suffixes:
        return base
    return with_suffix(base, max(suffixes) + 1)


def derive_slug(title: str, existing: Iterable[str] = ()) -> str:
    """Derive a unique slug for `title` given the slugs already in use."""
    return next_slug(base_slug(title), existing)
