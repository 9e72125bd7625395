"""Shared fixtures for the gallery tree tests.

The sample gallery used throughout::

    scope 1 "Main gallery"                 scope 2 "Archive gallery"
    1 All albums                           20 Archive
    ├── 2 Vacation                         ├── 21 2019
    │   ├── 5 Beach                        ├── 22 2020
    │   │   ├── 8 Day 1                    └── 23 2021
    │   │   │   ├── 42 Sunset
    │   │   │   └── 43 Dinner
    │   │   └── 9 Day 2
    │   └── 6 Mountains
    ├── 3 Family
    │   └── 7 Birthday
    └── 4 Private <b>Stuff</b>  (private)
        └── 10 Secret  (private)
"""

import logging
from pathlib import Path

import pytest

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from gallery_tree.core.event_log import LoggingErrorRecorder
from gallery_tree.core.models import Container, Role, Scope, SecurityAction, Subject
from gallery_tree.core.permissions import RoleBasedPermissionOracle
from gallery_tree.core.repository import InMemoryContainerRepository
from gallery_tree.core.services.tree_builder_service import TreeBuilderService

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

MAIN = Scope(1, "Main gallery")
ARCHIVE = Scope(2, "Archive gallery")


def _album(id, title, parent_id=None, scope_id=1, sort_order=0, is_private=False):
    return Container(id=id, scope_id=scope_id, title=title, parent_id=parent_id,
                     sort_order=sort_order, is_private=is_private)


@pytest.fixture
def repository():
    repo = InMemoryContainerRepository(scopes=[MAIN, ARCHIVE])
    for container in [
        _album(1, "All albums"),
        _album(2, "Vacation", 1, sort_order=1),
        _album(3, "Family", 1, sort_order=2),
        _album(4, "Private <b>Stuff</b>", 1, sort_order=3, is_private=True),
        _album(5, "Beach", 2),
        _album(6, "Mountains", 2),
        _album(7, "Birthday", 3),
        _album(8, "Day 1", 5),
        _album(9, "Day 2", 5),
        _album(10, "Secret", 4, is_private=True),
        _album(42, "Sunset", 8),
        _album(43, "Dinner", 8),
        _album(20, "Archive", scope_id=2),
        _album(21, "2019", 20, scope_id=2),
        _album(22, "2020", 20, scope_id=2),
        _album(23, "2021", 20, scope_id=2),
    ]:
        repo.add_container(container)
    return repo


@pytest.fixture
def oracle(repository):
    return RoleBasedPermissionOracle.for_repository(repository)


@pytest.fixture
def recorder():
    return LoggingErrorRecorder()


@pytest.fixture
def service(repository, oracle, recorder):
    return TreeBuilderService(repository, oracle, error_recorder=recorder)


@pytest.fixture
def anonymous():
    return Subject.anonymous()


@pytest.fixture
def admin():
    return Subject("admin", (Role("Admins", SecurityAction.ADMINISTER_SITE),))


@pytest.fixture
def editor():
    """Sees everything in the main gallery, may edit only below Vacation."""
    return Subject("ed", (
        Role("Viewers", SecurityAction.VIEW_ALBUM_OR_MEDIA_OBJECT, frozenset({1, 20})),
        Role("Vacation editors", SecurityAction.EDIT_ALBUM, frozenset({2})),
    ))

