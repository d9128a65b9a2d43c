"""Lightweight and annotated tags."""

import logging
import time
from typing import Optional

from grove.core.config import get_config
from grove.core.errors import InvalidReference
from grove.core.objects import Tag
from grove.core.refs import is_valid_ref_name
from grove.operations.commit import local_timezone

logger = logging.getLogger(__name__)


def create_tag(
    repo,
    name: str,
    target: str = 'HEAD',
    message: Optional[str] = None,
    tagger: Optional[str] = None,
    force: bool = False,
    timestamp: Optional[int] = None,
) -> str:
    """
    Create refs/tags/<name>.

    Without a message the ref points straight at the target (lightweight
    tag). With a message a Tag object is written and the ref points at it.

    Returns:
        str: Hash the new ref points to

    Raises:
        InvalidReference: If the name is invalid, the tag exists (and
            force is not set) or the target cannot be resolved
    """
    if not is_valid_ref_name(name):
        raise InvalidReference(f"Invalid tag name: '{name}'")

    ref_name = f'refs/tags/{name}'
    if repo.refs.read_ref(ref_name) is not None and not force:
        raise InvalidReference(f"Tag '{name}' already exists")

    target_hash = repo.refs.resolve_reference(target)
    ref_hash = target_hash

    if message is not None:
        if tagger is None:
            tagger = get_config(repo).get_signature()
        if timestamp is None:
            timestamp = int(time.time())
        tag_obj = Tag.create(
            target_hash=target_hash,
            target_kind=repo.objects.read(target_hash).kind,
            name=name,
            tagger=tagger,
            message=message if message.endswith('\n') else message + '\n',
            timestamp=timestamp,
            timezone=local_timezone(timestamp),
        )
        ref_hash = repo.objects.write(tag_obj)

    repo.refs.write_ref(ref_name, ref_hash)
    logger.info("Created tag %s -> %s", name, ref_hash[:7])
    return ref_hash
