import pytest

from vitrine.media.media_types import (
    ASSET_EXTENSIONS,
    ASSET_FOLDERS,
    AssetKind,
    get_folder_for_kind,
)


@pytest.mark.unit
def test_get_folder_for_kind():
    assert get_folder_for_kind(AssetKind.VIDEO) == "video/previews"
    assert get_folder_for_kind(AssetKind.LOGO) == "images/logos"
    assert get_folder_for_kind(AssetKind.ICON) == "icons"


@pytest.mark.unit
def test_every_kind_has_folder_and_extension():
    assert set(ASSET_FOLDERS) == set(AssetKind)
    assert set(ASSET_EXTENSIONS) == set(AssetKind)
    assert ASSET_EXTENSIONS[AssetKind.ICON] == "ico"
