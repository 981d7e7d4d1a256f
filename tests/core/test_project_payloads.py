"""
Unit tests for project payload serialization and schema validation.
"""

import pytest

from gangsheet_toolkit.core.models import Item, LayoutMode, Project, Sheet, ViewState, get_preset
from gangsheet_toolkit.core.schemas import PROJECT_SCHEMA_VERSION, ValidationError, validate_project
from gangsheet_toolkit.core.utils import payload_to_project, project_to_payload, structural_copy


@pytest.fixture
def project():
    items = (
        Item("item-a", "a.png", "a.png", 100, 50, x=10, y=20, rotation=45, scale=0.5),
        Item("item-b", "b.png", "b.png", 30, 30, visible=False),
    )
    return Project(
        sheet=get_preset("22x60"),
        items=items,
        export_dpi=150,
        view=ViewState(zoom=2.0, transparent=True, layout_mode=LayoutMode.SMART),
        revision=7,
    )


class TestProjectToPayload:
    def test_when_serialized_then_has_expected_keys(self, project):
        payload = project_to_payload(project)
        assert set(payload) == {"version", "items", "sheetPreset", "dpi", "unit", "view"}
        assert payload["version"] == PROJECT_SCHEMA_VERSION
        assert payload["dpi"] == 150
        assert payload["unit"] == "inch"

    def test_when_serialized_then_revision_not_included(self, project):
        assert "revision" not in project_to_payload(project)

    def test_when_round_trip_then_everything_but_revision_preserved(self, project):
        restored = payload_to_project(project_to_payload(project))
        assert restored.items == project.items
        assert restored.sheet == project.sheet
        assert restored.export_dpi == project.export_dpi
        assert restored.view == project.view
        assert restored.revision == 0


class TestPayloadToProject:
    def test_when_empty_payload_then_defaults(self):
        project = payload_to_project({})
        assert project.items == ()
        assert project.sheet == get_preset("22x24")
        assert project.export_dpi == 300
        assert project.view == ViewState()

    def test_when_unit_differs_from_sheet_then_unit_wins(self):
        payload = {"sheetPreset": {"name": "custom", "width": 50, "height": 60, "unit": "inch"}, "unit": "cm"}
        project = payload_to_project(payload)
        assert project.sheet.unit == "centimeter"
        assert project.sheet.width == 50

    def test_when_pixel_sheet_then_preserved(self):
        sheet = Sheet("px", 400, 300, "pixel")
        restored = payload_to_project(project_to_payload(Project(sheet=sheet)))
        assert restored.sheet == sheet


class TestValidateProject:
    def test_when_not_object_then_raises(self):
        with pytest.raises(ValidationError, match="must be an object"):
            validate_project([1, 2])

    def test_when_item_missing_src_then_raises_with_path(self):
        with pytest.raises(ValidationError) as exc:
            validate_project({"items": [{"id": "a", "width": 1, "height": 1}]})
        assert "src" in str(exc.value)

    def test_when_negative_scale_then_raises(self):
        item = {"id": "a", "src": "s", "width": 1, "height": 1, "scale": -1}
        with pytest.raises(ValidationError):
            validate_project({"items": [item]})

    def test_when_unknown_layout_mode_then_raises(self):
        with pytest.raises(ValidationError) as exc:
            validate_project({"view": {"layoutMode": "spiral"}})
        assert exc.value.path == "view/layoutMode"

    def test_when_newer_version_then_raises(self):
        with pytest.raises(ValidationError, match="Unsupported"):
            validate_project({"version": PROJECT_SCHEMA_VERSION + 1})

    def test_when_duplicate_ids_then_raises(self):
        item = {"id": "a", "src": "s", "width": 1, "height": 1}
        with pytest.raises(ValidationError, match="Duplicate"):
            validate_project({"items": [item, dict(item)]})

    def test_when_extra_keys_then_accepted(self):
        validate_project({"items": [], "futureField": True})


class TestStructuralCopy:
    def test_when_nested_containers_then_independent(self):
        original = {"a": [1, {"b": 2}]}
        copied = structural_copy(original)
        copied["a"][1]["b"] = 3
        assert original["a"][1]["b"] == 2

    def test_when_uncopyable_member_then_shallow_copy(self):
        class NoCopy:
            def __deepcopy__(self, memo):
                raise TypeError("nope")

        marker = NoCopy()
        original = [marker]
        copied = structural_copy(original)
        assert copied == original
        assert copied is not original
        assert copied[0] is marker
