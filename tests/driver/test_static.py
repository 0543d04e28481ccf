"""Unit tests for rigbox.driver.static: the static instance lifecycle."""

import pytest

from rigbox.driver.static import StaticLifecycle, for_lifecycle
from rigbox.errors import ClientError


def test_static_create_records_host():
    lifecycle = StaticLifecycle({"hostname": "10.0.0.5", "username": "ubuntu", "port": 2222, "sudo": True})
    state = {}
    lifecycle.create(state)
    assert state == {"hostname": "10.0.0.5", "username": "ubuntu", "port": 2222}


def test_static_create_requires_hostname():
    with pytest.raises(ClientError, match="requires 'hostname'"):
        StaticLifecycle({"username": "ubuntu"}).create({})


def test_static_destroy_clears_host():
    state = {"hostname": "10.0.0.5", "username": "ubuntu", "port": 22, "extra": 1}
    StaticLifecycle({}).destroy(state)
    assert state == {"extra": 1}


def test_static_destroy_without_host_is_noop():
    state = {}
    StaticLifecycle({}).destroy(state)
    assert state == {}


def test_for_lifecycle():
    assert for_lifecycle(None, {}) is None
    assert isinstance(for_lifecycle("static", {}), StaticLifecycle)
    with pytest.raises(ClientError, match="Unknown driver 'ec2'"):
        for_lifecycle("ec2", {})
