"""Tests for the endpoint table and record mapping."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
import respx
from httpx import Response

from cclib.exceptions import FieldMappingError
from cclib.models import Addon, Application, Deployment, Log, Worker
from cclib.resources import ENDPOINTS, Endpoint, build_timestamp, get_endpoint, map_record
from cclib.session import Session

from .conftest import make_app_dict, make_deployment_dict


class TestEndpointResolve:
    """Tests for path template resolution."""

    def test_resolve(self):
        path = get_endpoint("deployment.read").resolve(app_name="myapp", dep_name="default")

        assert path == "/app/myapp/deployment/default/"

    def test_trailing_slash_kept(self):
        """Test that every templated path keeps its trailing slash."""
        for name, endpoint in ENDPOINTS.items():
            assert endpoint.path.endswith("/"), name

    def test_identifiers_are_quoted(self):
        """Test that identifiers cannot inject path segments."""
        path = get_endpoint("app.read").resolve(app_name="my/app")

        assert path == "/app/my%2Fapp/"

    def test_email_identifier_kept(self):
        """Test that email user names are placed in the path as is."""
        path = get_endpoint("user.read").resolve(user_name="john@example.com")

        assert path == "/user/john@example.com/"

    def test_missing_parameter(self):
        with pytest.raises(ValueError, match="dep_name"):
            get_endpoint("deployment.read").resolve(app_name="myapp")

    def test_empty_parameter(self):
        with pytest.raises(ValueError):
            get_endpoint("app.read").resolve(app_name="")

    def test_unknown_parameter(self):
        with pytest.raises(ValueError, match="colour"):
            get_endpoint("app.read").resolve(app_name="myapp", colour="blue")

    def test_query_parameter(self):
        endpoint = get_endpoint("log.read")

        path = endpoint.resolve(
            app_name="myapp", dep_name="default", log_type="error", timestamp="1414156800.5"
        )

        assert path == "/app/myapp/deployment/default/log/error/?timestamp=1414156800.5"

    def test_query_parameter_omitted(self):
        path = get_endpoint("log.read").resolve(app_name="myapp", dep_name="default", log_type="access")

        assert path == "/app/myapp/deployment/default/log/access/"

    def test_parameters(self):
        assert get_endpoint("worker.read").parameters == ["app_name", "dep_name", "worker_id"]

    def test_unknown_endpoint(self):
        with pytest.raises(KeyError):
            get_endpoint("app.explode")


class TestMapRecord:
    """Tests for tree to record mapping."""

    def test_single_record(self):
        app = map_record(get_endpoint("app.read"), make_app_dict())

        assert isinstance(app, Application)
        assert app.name == "myapp"
        assert app.type.name == "python"
        assert app.owner.username == "john"
        assert app.deployments[0].id == "dep12345678"

    def test_aliased_fields(self):
        """Test that wire names map onto record attributes."""
        dep = map_record(get_endpoint("deployment.read"), make_deployment_dict())

        assert isinstance(dep, Deployment)
        assert dep.containers == 2
        assert dep.size == 4
        assert dep.billed_boxes.free_boxes == 1
        assert dep.billed_addons[0].name == "mysqls.free"

    def test_list_of_records(self):
        workers = map_record(
            get_endpoint("worker.list"),
            [{"wrk_id": "wrk1", "command": "python worker.py"}, {"wrk_id": "wrk2"}],
        )

        assert [w.id for w in workers] == ["wrk1", "wrk2"]
        assert all(isinstance(w, Worker) for w in workers)

    def test_unknown_keys_ignored(self):
        addon = map_record(
            get_endpoint("addon.read"),
            {"name": "mysqls.free", "addon_option": {"name": "MYSQLS.free"}, "price": 0},
        )

        assert isinstance(addon, Addon)
        assert addon.option.name == "MYSQLS.free"
        assert addon.settings is None

    def test_shape_mismatch(self):
        """Test that a tree of the wrong shape raises FieldMappingError."""
        with pytest.raises(FieldMappingError) as exc_info:
            map_record(get_endpoint("app.list"), {"name": "myapp"})

        assert exc_info.value.record == "list[Application]"

    def test_missing_required_field(self):
        with pytest.raises(FieldMappingError):
            map_record(get_endpoint("worker.read"), {"command": "python worker.py"})

    def test_delete_has_no_record(self):
        assert map_record(get_endpoint("app.delete"), None) is None


class TestBuildTimestamp:
    def test_build_timestamp(self):
        dt = datetime(2014, 10, 24, 13, 20, 0, 250000, tzinfo=timezone.utc)

        assert build_timestamp(dt) == "1414156800.250000"

    def test_build_timestamp_whole_seconds(self):
        dt = datetime(2014, 10, 24, 13, 20, tzinfo=timezone.utc)

        assert build_timestamp(dt) == "1414156800.0"


class TestInvoke:
    """Tests for the generic invoker."""

    @pytest.mark.asyncio
    async def test_invoke_read(self, config, token, api_base_url):
        with respx.mock:
            respx.get(f"{api_base_url}/app/myapp/").mock(
                return_value=Response(200, json=make_app_dict())
            )

            async with Session(token=token, config=config) as session:
                app = await session.invoke("app.read", app_name="myapp")

        assert isinstance(app, Application)
        assert app.name == "myapp"

    @pytest.mark.asyncio
    async def test_invoke_create(self, config, token, api_base_url):
        with respx.mock:
            route = respx.post(f"{api_base_url}/app/myapp/deployment/").mock(
                return_value=Response(201, json=make_deployment_dict())
            )

            async with Session(token=token, config=config) as session:
                dep = await session.invoke(
                    "deployment.create", {"name": "default", "stack": "pinky"}, app_name="myapp"
                )

        assert dep.name == "myapp/default"
        assert route.calls.last.request.content == b"name=default&stack=pinky"

    @pytest.mark.asyncio
    async def test_invoke_update(self, config, token, api_base_url):
        with respx.mock:
            route = respx.put(f"{api_base_url}/app/myapp/deployment/default/addon/mysqls.free/").mock(
                return_value=Response(200, json={"name": "mysqls.small"})
            )

            async with Session(token=token, config=config) as session:
                addon = await session.invoke(
                    "addon.update",
                    {"addon": "mysqls.small", "force": "true"},
                    app_name="myapp",
                    dep_name="default",
                    addon_name="mysqls.free",
                )

        assert addon.name == "mysqls.small"
        assert route.called

    @pytest.mark.asyncio
    async def test_invoke_delete(self, config, token, api_base_url):
        with respx.mock:
            route = respx.delete(f"{api_base_url}/user/john/key/abc/").mock(
                return_value=Response(204)
            )

            async with Session(token=token, config=config) as session:
                result = await session.invoke("key.delete", user_name="john", key_id="abc")

        assert result is None
        assert route.called

    @pytest.mark.asyncio
    async def test_invoke_list_with_query(self, config, token, api_base_url):
        logs = [{"type": "error", "message": "boom", "time": 1414156800.5}]

        with respx.mock:
            route = respx.get(
                f"{api_base_url}/app/myapp/deployment/default/log/error/",
                params={"timestamp": "1414156800.5"},
            ).mock(return_value=Response(200, json=logs))

            async with Session(token=token, config=config) as session:
                result = await session.invoke(
                    "log.read",
                    app_name="myapp",
                    dep_name="default",
                    log_type="error",
                    timestamp="1414156800.5",
                )

        assert result == [Log(type="error", message="boom", time=1414156800.5)]
        assert route.called

    @pytest.mark.asyncio
    async def test_invoke_custom_endpoint(self, config, token, api_base_url):
        """Test invoking an endpoint that is not in the table."""
        endpoint = Endpoint("GET", "/app/{app_name}/deployment/", Deployment, many=True)

        with respx.mock:
            respx.get(f"{api_base_url}/app/myapp/deployment/").mock(
                return_value=Response(200, json=[make_deployment_dict()])
            )

            async with Session(token=token, config=config) as session:
                deps = await session.invoke(endpoint, app_name="myapp")

        assert deps[0].id == "dep12345678"

    @pytest.mark.asyncio
    async def test_invoke_shape_mismatch(self, config, token, api_base_url):
        with respx.mock:
            respx.get(f"{api_base_url}/app/").mock(return_value=Response(200, json={"oops": 1}))

            async with Session(token=token, config=config) as session:
                with pytest.raises(FieldMappingError):
                    await session.invoke("app.list")

    @pytest.mark.asyncio
    async def test_invoke_unsupported_method(self, config, token):
        endpoint = Endpoint("PATCH", "/app/")

        async with Session(token=token, config=config) as session:
            with pytest.raises(ValueError):
                await session.invoke(endpoint)
