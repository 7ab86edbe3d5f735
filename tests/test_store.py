from __future__ import annotations

from uuid import uuid4

import pytest
from PIL import Image

from selfiestore import SelfieStore, StoreConfig
from selfiestore.errors import DeletionError
from selfiestore.schemas import Selfie


def _make_store(tmp_path) -> SelfieStore:
    return SelfieStore(tmp_path / "selfies")


def test_creating_selfie_is_listed(tmp_path) -> None:
    store = _make_store(tmp_path)
    selfie = Selfie(title="Creation Test Selfie")

    store.save(selfie)

    listed = [item for item in store.list() if item.id == selfie.id]
    assert len(listed) == 1
    assert listed[0].title == "Creation Test Selfie"


def test_saving_with_image(tmp_path, solid_image) -> None:
    store = _make_store(tmp_path)
    selfie = Selfie(title="Selfie with image test")

    store.set_image(selfie, solid_image)
    store.save(selfie)

    assert store.get_image(selfie.id) is not None


def test_save_does_not_touch_image(tmp_path, solid_image) -> None:
    store = _make_store(tmp_path)
    selfie = store.create("with image")
    store.set_image(selfie, solid_image)

    selfie.title = "renamed"
    store.save(selfie)

    assert store.get_image(selfie).tobytes() == solid_image.tobytes()
    assert store.images.path_for(selfie).is_file()


def test_create_uses_default_title(tmp_path) -> None:
    store = _make_store(tmp_path)

    selfie = store.create()

    assert selfie.title == "New Selfie!"
    assert store.load(selfie.id) == selfie


def test_full_lifecycle(tmp_path, solid_image) -> None:
    store = _make_store(tmp_path)
    selfie = Selfie(title="Test")

    store.save(selfie)
    listed = store.list()
    assert [(item.id, item.title) for item in listed] == [(selfie.id, "Test")]
    assert store.get_image(selfie.id) is None

    store.set_image(selfie.id, solid_image)
    assert store.get_image(selfie.id).tobytes() == solid_image.tobytes()

    store.delete(selfie.id)
    assert store.list() == []
    assert store.load(selfie.id) is None
    assert store.get_image(selfie.id) is None
    assert list(store.root.iterdir()) == []


def test_delete_by_selfie(tmp_path, solid_image) -> None:
    store = _make_store(tmp_path)
    selfie = store.create("Test deleting a selfie")
    store.set_image(selfie, solid_image)
    before = store.list()

    store.delete(selfie)

    assert len(store.list()) == len(before) - 1
    assert store.load(selfie.id) is None
    assert not store.images.is_cached(selfie.id)


def test_delete_without_image_or_record_is_tolerated(tmp_path) -> None:
    store = _make_store(tmp_path)
    selfie = store.create("no image")

    store.delete(selfie.id)
    store.delete(selfie.id)
    store.delete(uuid4())

    assert store.list() == []


def test_delete_removes_orphaned_image(tmp_path, solid_image) -> None:
    store = _make_store(tmp_path)
    selfie_id = uuid4()
    store.set_image(selfie_id, solid_image)

    store.delete(selfie_id)

    assert store.get_image(selfie_id) is None
    assert not store.images.path_for(selfie_id).exists()


def test_delete_removes_record_first_and_evicts_on_image_failure(tmp_path, solid_image) -> None:
    store = _make_store(tmp_path)
    selfie = store.create("blocked image")
    store.set_image(selfie, solid_image)
    image_path = store.images.path_for(selfie)
    image_path.unlink()
    image_path.mkdir()

    with pytest.raises(DeletionError):
        store.delete(selfie)

    assert store.load(selfie.id) is None
    assert not store.images.is_cached(selfie.id)


def test_delete_after_arbitrary_prior_state(tmp_path) -> None:
    store = _make_store(tmp_path)
    selfies = [store.create(f"selfie {index}") for index in range(5)]
    for selfie in selfies[::2]:
        store.set_image(selfie, Image.new("RGB", (8, 8), color=(40, 80, 120)))

    for selfie in selfies:
        store.delete(selfie)
        assert store.load(selfie.id) is None
        assert store.get_image(selfie.id) is None

    assert store.list() == []


def test_list_reflects_last_saved_state(tmp_path) -> None:
    store = _make_store(tmp_path)
    selfies = [store.create(f"selfie {index}") for index in range(3)]
    selfies[0].title = "edited"
    store.save(selfies[0])

    store.delete(selfies[2])
    listed = {selfie.id: selfie for selfie in store.list()}

    assert len(listed) == 2
    assert listed[selfies[0].id].title == "edited"
    assert listed[selfies[1].id] == selfies[1]


def test_from_config(tmp_path, solid_image) -> None:
    config = StoreConfig(directory=str(tmp_path / "configured"), image_quality=50)

    store = SelfieStore.from_config(config)
    store.set_image(uuid4(), solid_image)

    assert store.root == tmp_path / "configured"
    assert store.images.codec.quality == 50
    assert any(path.name.endswith("-image.jpg") for path in store.root.iterdir())
