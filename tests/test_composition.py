import pytest

from composition import Composition, ParameterDescriptor, build_composition
from scene_models import SceneObject, SceneValidationError


# -------------------------
# Composition container
# -------------------------

def test_new_composition_is_empty():
    composition = Composition()
    assert len(composition) == 0
    assert composition.objects == ()
    assert composition.to_dict() == {"objects": []}

def test_append_preserves_call_order(sample_objects):
    objects = [SceneObject.from_dict(bag) for bag in sample_objects]
    composition = Composition()
    for obj in reversed(objects):
        composition.append(obj)
    assert composition.objects == tuple(reversed(objects))
    assert [o["type"] for o in composition.to_dict()["objects"]] == [b["type"] for b in reversed(sample_objects)]

def test_append_allows_duplicates():
    obj = SceneObject.from_dict({"type": "text", "text": "again"})
    composition = Composition()
    composition.append(obj)
    composition.append(obj)
    assert len(composition) == 2
    assert list(composition) == [obj, obj]

def test_append_rejects_none():
    composition = Composition()
    with pytest.raises(SceneValidationError):
        composition.append(None)
    assert len(composition) == 0

def test_append_rejects_raw_field_bags():
    composition = Composition()
    with pytest.raises(SceneValidationError):
        composition.append({"type": "text", "text": "not validated"})

def test_objects_view_is_immutable():
    composition = Composition()
    composition.append(SceneObject.from_dict({"type": "image", "src": "a.png"}))
    view = composition.objects
    assert isinstance(view, tuple)
    composition.append(SceneObject.from_dict({"type": "image", "src": "b.png"}))
    assert len(view) == 1
    assert len(composition.objects) == 2


# -------------------------
# Batch building
# -------------------------

@pytest.mark.parametrize("max_workers", [None, 1, 2, 8])
def test_build_keeps_submission_order(sample_objects, max_workers):
    bags = sample_objects * 5
    composition = build_composition(bags, max_workers=max_workers)
    assert [obj.type for obj in composition] == [bag["type"] for bag in bags]

def test_build_order_independent_of_completion(make_music, make_hit):
    # Big grids take longer to validate than plain text objects
    heavy = make_music(length=16, instructions=[[make_hit() for _ in range(8)] for _ in range(64)])
    bags = [heavy, {"type": "text", "text": "a"}, heavy, {"type": "text", "text": "b"}]
    composition = build_composition(bags, max_workers=4)
    assert [obj.type for obj in composition] == ["music", "text", "music", "text"]
    assert composition.objects[3].text == "b"

def test_build_empty_list():
    assert len(build_composition([])) == 0

def test_build_reports_first_failing_index(sample_objects):
    bags = list(sample_objects)
    bags[2] = {"type": "link"}
    bags[5] = {"type": "sprite"}
    with pytest.raises(SceneValidationError) as exc:
        build_composition(bags, max_workers=4)
    assert exc.value.field == "objects.2.url"
    assert exc.value.message.startswith("Object 2:")

def test_build_rejects_unknown_type_with_index():
    with pytest.raises(SceneValidationError) as exc:
        build_composition([{"type": "text", "text": "ok"}, {"type": "hologram"}], max_workers=1)
    assert exc.value.field == "objects.1.type"

def test_build_result_round_trips(sample_objects):
    composition = build_composition(sample_objects)
    rebuilt = build_composition(composition.to_dict()["objects"])
    assert rebuilt.to_dict() == composition.to_dict()


# -------------------------
# Parameter descriptor
# -------------------------

def test_parameter_descriptor_fields():
    descriptor = ParameterDescriptor.create("city", "e.g. Lisbon")
    assert descriptor.name == "city"
    assert descriptor.type == "text"
    assert descriptor.placeholder == "e.g. Lisbon"

def test_parameter_descriptor_config():
    descriptor = ParameterDescriptor.create("mood", "happy, sad, ...")
    assert descriptor.to_config() == {
        "args": [{"name": "mood", "type": "text", "placeholder": "happy, sad, ..."}]
    }

@pytest.mark.parametrize("name, placeholder, field", [
    ("", "hint", "name"),
    ("city", "", "placeholder"),
])
def test_parameter_descriptor_requires_values(name, placeholder, field):
    with pytest.raises(SceneValidationError) as exc:
        ParameterDescriptor.create(name, placeholder)
    assert exc.value.field == field

def test_parameter_descriptor_kind_is_fixed():
    with pytest.raises(ValueError):
        ParameterDescriptor(name="city", placeholder="hint", type="number")

def test_parameter_descriptor_is_frozen():
    descriptor = ParameterDescriptor.create("city", "hint")
    with pytest.raises(ValueError):
        descriptor.name = "town"
