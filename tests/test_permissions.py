import pytest

from handpose_gesture.exceptions import PermissionDenied
from handpose_gesture.permissions import (
    SETTINGS_DIRECTIVE,
    CameraAuthorization,
    CameraPermissionGate,
)


def test_authorized_passes():
    CameraPermissionGate(lambda: CameraAuthorization.AUTHORIZED).ensure_authorized()


def test_not_determined_requests_access():
    requests = []

    def request_access():
        requests.append(True)
        return True

    gate = CameraPermissionGate(lambda: CameraAuthorization.NOT_DETERMINED, request_access)
    gate.ensure_authorized()

    assert requests == [True]


def test_refused_request_is_denied():
    gate = CameraPermissionGate(lambda: CameraAuthorization.NOT_DETERMINED, lambda: False)

    with pytest.raises(PermissionDenied) as info:
        gate.ensure_authorized()
    assert info.value.directive == SETTINGS_DIRECTIVE


@pytest.mark.parametrize("status", [CameraAuthorization.DENIED, CameraAuthorization.RESTRICTED])
def test_denied_and_restricted_redirect_to_settings(status):
    gate = CameraPermissionGate(lambda: status, lambda: pytest.fail("must not request access"))

    with pytest.raises(PermissionDenied) as info:
        gate.ensure_authorized()
    assert "settings" in info.value.directive


def test_from_setting():
    with pytest.raises(PermissionDenied):
        CameraPermissionGate.from_setting("denied").ensure_authorized()
    with pytest.raises(ValueError):
        CameraPermissionGate.from_setting("maybe")
