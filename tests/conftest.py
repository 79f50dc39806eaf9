"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from flatdata.repositories.loader import RepositoryLoader
from flatdata.repositories.yaml_loader import YamlLoader
from flatdata.service import FlatDataService

PROJECT_YML = "\n".join(
    [f"{i}:\n  name: project {i}\n  some_value: {i * 3}" for i in range(10)]
) + """
real_project_1:
  name: real project 1!
  some_value: '90'
  manager:
    repository: user
    foreign_alias: managed_projects
    type: one
    values:
      - mr_admin
  users:
    repository: user
    foreign_alias: projects
    values:
      - mr_admin
      - joe
      - bob
"""

USER_YML = """
mr_admin:
  name: Mr. Admin
  email: admin@example.com
joe:
  name: Joe
  email: joe@example.com
"""

WORK_ITEM_YML = """
work_item_a:
  name: Work item A
  is_php: true
  project:
    repository: project
    foreign_alias: work_items
    values: [real_project_1]
work_item_b:
  name: Work item B
  project:
    repository: project
    foreign_alias: work_items
    values: [real_project_1, 3]
work_item_c:
  name: Work item C
  project:
    repository: project
    type: one
    values: [missing_project]
"""

NOTE_YML = """
n1:
  text: first note
  tags: [a, b]
n2:
  text: second note
  meta:
    pinned: true
"""


class CountingYamlLoader(YamlLoader):
    """YamlLoader that counts parsed files by repository name."""

    def __init__(self):
        self.calls: list[str] = []

    def load(self, path: Path):
        self.calls.append(Path(path).stem)
        return super().load(path)


@pytest.fixture
def data_dir(tmp_path):
    """Directory holding the project/user/work_item/note repositories."""
    directory = tmp_path / "data"
    directory.mkdir()
    (directory / "project.yml").write_text(PROJECT_YML)
    (directory / "user.yml").write_text(USER_YML)
    (directory / "work_item.yml").write_text(WORK_ITEM_YML)
    (directory / "note.yml").write_text(NOTE_YML)
    return directory


@pytest.fixture
def parser():
    return CountingYamlLoader()


@pytest.fixture
def loader(data_dir, parser):
    return RepositoryLoader(data_dir, parser)


@pytest.fixture
def service(loader):
    return FlatDataService(loader)
