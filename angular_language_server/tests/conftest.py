from pathlib import Path

import pytest

from ..server.analyzers import ComponentAnalyzer, TemplateParser
from ..server.documents import DocumentStore
from ..server.indexing import ComponentIndex
from .sources import BAR_COMPONENT, FOO_COMPONENT, PLAIN_SOURCE


@pytest.fixture
def analyzer():
    return ComponentAnalyzer()


@pytest.fixture
def template_parser():
    return TemplateParser()


@pytest.fixture
def component_index():
    return ComponentIndex()


@pytest.fixture
def store():
    return DocumentStore()


@pytest.fixture
def workspace(tmp_path: Path):
    src = tmp_path / "src" / "app"
    src.mkdir(parents=True)

    (src / "foo.component.ts").write_text(FOO_COMPONENT)
    (src / "bar").mkdir()
    (src / "bar" / "bar.component.ts").write_text(BAR_COMPONENT)
    (src / "plain.ts").write_text(PLAIN_SOURCE)
    (src / "foo.component.html").write_text("<app-bar></app-bar>")
    (tmp_path / "outside.ts").write_text(FOO_COMPONENT.replace("app-foo", "app-outside"))

    return tmp_path
