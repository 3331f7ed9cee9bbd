"""Tests for backend request building and the registry."""

import pytest

from conftest import GARMENT_PNG, PERSON_PNG
from tryon_gateway.backends import (
    DEFAULT_BACKEND_ID,
    IDM_VTON_DESCRIPTOR,
    OOTDIFFUSION_DESCRIPTOR,
    BackendRegistry,
    IDMVTONAdapter,
    OOTDiffusionAdapter,
    build_default_registry,
)
from tryon_gateway.core.space_client import ImageBlob
from tryon_gateway.models import GarmentCategory, TryOnRequest


def make_request(category: GarmentCategory, description=None) -> TryOnRequest:
    return TryOnRequest(
        person_image_url="https://cdn.example.com/person.png",
        garment_image_url="https://cdn.example.com/garment.png",
        category=category,
        garment_description=description,
    )


@pytest.mark.parametrize("category", list(GarmentCategory))
def test_idm_vton_payload_matches_tryon_signature(space_client, category) -> None:
    adapter = IDMVTONAdapter(IDM_VTON_DESCRIPTOR, space_client)

    payload = adapter.build_request(
        make_request(category, "Blue denim jacket"), PERSON_PNG, GARMENT_PNG
    )

    assert payload.api_name == "/tryon"
    assert len(payload.data) == 7
    editor, garment, description, auto_mask, auto_crop, steps, seed = payload.data
    assert set(editor) == {"background", "layers", "composite"}
    assert isinstance(editor["background"], ImageBlob)
    assert editor["background"].data == PERSON_PNG
    assert editor["layers"] == []
    assert editor["composite"] is None
    assert isinstance(garment, ImageBlob)
    assert garment.data == GARMENT_PNG
    assert description == "Blue denim jacket"
    assert (auto_mask, auto_crop, steps, seed) == (True, False, 30, 42)


def test_idm_vton_uses_placeholder_description(space_client) -> None:
    adapter = IDMVTONAdapter(IDM_VTON_DESCRIPTOR, space_client)

    payload = adapter.build_request(
        make_request(GarmentCategory.UPPER_BODY), PERSON_PNG, GARMENT_PNG
    )

    assert payload.data[2] == "A shirt"


def test_ootdiffusion_upper_body_uses_half_body_model(space_client) -> None:
    adapter = OOTDiffusionAdapter(OOTDIFFUSION_DESCRIPTOR, space_client)

    payload = adapter.build_request(
        make_request(GarmentCategory.UPPER_BODY, "ignored"), PERSON_PNG, GARMENT_PNG
    )

    assert payload.api_name == "/process_hd"
    assert len(payload.data) == 6
    person, garment, *params = payload.data
    assert person.data == PERSON_PNG
    assert garment.data == GARMENT_PNG
    assert params == [1, 20, 2, -1]


@pytest.mark.parametrize(
    ("category", "ootd_category"),
    [
        (GarmentCategory.LOWER_BODY, "Lower-body"),
        (GarmentCategory.DRESS, "Dress"),
    ],
)
def test_ootdiffusion_full_body_model_remaps_category(
    space_client, category, ootd_category
) -> None:
    adapter = OOTDiffusionAdapter(OOTDIFFUSION_DESCRIPTOR, space_client)

    payload = adapter.build_request(make_request(category), PERSON_PNG, GARMENT_PNG)

    assert payload.api_name == "/process_dc"
    assert len(payload.data) == 7
    person, garment, mapped, *params = payload.data
    assert person.data == PERSON_PNG
    assert garment.data == GARMENT_PNG
    assert mapped == ootd_category
    assert params == [1, 20, 2, -1]


def test_default_registry_order_and_default(space_client) -> None:
    registry = build_default_registry(space_client)

    assert registry.ids() == ["IDM-VTON", "OOTDiffusion"]
    assert registry.default.id == DEFAULT_BACKEND_ID == "IDM-VTON"
    assert "OOTDiffusion" in registry
    assert registry.get("OOTDiffusion").descriptor.connection_target == "levihsu/OOTDiffusion"
    assert registry.get("unknown") is None
    assert registry.get(None) is None


def test_registry_rejects_duplicate_ids(space_client) -> None:
    registry = BackendRegistry([IDMVTONAdapter(IDM_VTON_DESCRIPTOR, space_client)])

    with pytest.raises(ValueError):
        registry.register(IDMVTONAdapter(IDM_VTON_DESCRIPTOR, space_client))


def test_empty_registry_has_no_default() -> None:
    with pytest.raises(LookupError):
        BackendRegistry().default


def test_request_has_no_implicit_category() -> None:
    with pytest.raises(TypeError):
        TryOnRequest(
            person_image_url="https://cdn.example.com/person.png",
            garment_image_url="https://cdn.example.com/garment.png",
        )
