"""
JSON 렌더러: Template 전체를 pretty-print (무손실, 유일한 round-trip 포맷).
"""

from src.core.serialize import serialize_template
from src.domain.schemas import Template
from src.render.base import ExportArtifact, make_artifact


class JsonRenderer:
    """Template → {title or 'document'}.json"""

    def render(self, template: Template) -> ExportArtifact:
        content = serialize_template(template).encode("utf-8")
        return make_artifact(template, "json", content)


def render_json(template: Template) -> ExportArtifact:
    return JsonRenderer().render(template)
