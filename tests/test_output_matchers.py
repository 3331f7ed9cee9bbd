"""Tests for locating the output image in heterogeneous backend responses."""

import base64

import pytest

from conftest import RESULT_PNG
from tryon_gateway.backends import IDM_VTON_DESCRIPTOR, IDMVTONAdapter
from tryon_gateway.backends.base import (
    GalleryImage,
    InlineImage,
    RemoteImage,
    match_direct_url,
    match_gallery,
    match_inline,
)
from tryon_gateway.core.errors import UnexpectedOutputFormatError
from tryon_gateway.core.space_client import GradioResponse


@pytest.fixture
def adapter(space_client) -> IDMVTONAdapter:
    return IDMVTONAdapter(IDM_VTON_DESCRIPTOR, space_client)


def test_direct_url_fixture(adapter) -> None:
    response = GradioResponse(
        data=[
            {"path": "/tmp/gradio/out.png", "url": "https://space.hf.space/file=out.png"},
            {"path": "/tmp/gradio/mask.png", "url": "https://space.hf.space/file=mask.png"},
        ]
    )

    assert adapter.extract_output_reference(response) == RemoteImage(
        "https://space.hf.space/file=out.png"
    )


def test_gallery_fixture(adapter) -> None:
    response = GradioResponse(
        data=[
            [
                {"image": {"path": "/tmp/a.png", "url": "https://space.hf.space/file=a.png"}, "caption": None},
                {"image": {"path": "/tmp/b.png", "url": "https://space.hf.space/file=b.png"}, "caption": None},
            ]
        ]
    )

    ref = adapter.extract_output_reference(response)

    assert isinstance(ref, GalleryImage)
    assert ref.first == RemoteImage("https://space.hf.space/file=a.png")
    assert len(ref.items) == 2


def test_inline_bytes_fixture(adapter) -> None:
    response = GradioResponse(data=[RESULT_PNG])

    assert adapter.extract_output_reference(response) == InlineImage(RESULT_PNG)


def test_inline_data_uri(adapter) -> None:
    encoded = base64.b64encode(RESULT_PNG).decode("ascii")
    response = GradioResponse(data=[f"data:image/png;base64,{encoded}"])

    assert adapter.extract_output_reference(response) == InlineImage(RESULT_PNG)


def test_direct_url_preferred_over_other_shapes() -> None:
    output = {"url": "https://x/out.png", "image": {"url": "https://x/other.png"}}

    assert match_direct_url(output) == RemoteImage("https://x/out.png")
    assert match_gallery(output) is None
    assert match_inline(output) is None


def test_gallery_of_plain_file_data() -> None:
    ref = match_gallery([{"url": "https://x/1.png"}, {"url": "https://x/2.png"}])

    assert ref == GalleryImage((RemoteImage("https://x/1.png"), RemoteImage("https://x/2.png")))


@pytest.mark.parametrize(
    "data",
    [
        [],
        [None],
        [{"path": "/tmp/out.png"}],
        [[]],
        [[{"caption": "no image"}]],
        ["not an image"],
        [42],
    ],
)
def test_unrecognised_output_is_a_contract_error(adapter, data) -> None:
    with pytest.raises(UnexpectedOutputFormatError) as exc_info:
        adapter.extract_output_reference(GradioResponse(data=data, api_name="/tryon"))

    assert "IDM-VTON" in str(exc_info.value)
