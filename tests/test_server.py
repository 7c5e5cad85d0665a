"""gRPC 統合テスト（Focus サービス）。

Raise() と Version() がローカルの gRPC サーバー経由で正しく動作することを
検証する。
"""

import asyncio
import json

import grpc
import pytest
from google.protobuf import empty_pb2

from focus_bridge.client import try_raise, try_version
from focus_bridge.config import FocusConfig
from focus_bridge.server import FocusService, FocusServicer
from tests.mock_data import TEST_VERSION


@pytest.mark.integration
class TestFocusVersion:
    """Version() のテスト"""

    @pytest.mark.asyncio
    async def test_version_returns_configured_version(self, focus_stub):
        """Version() が起動時に渡したバージョンを返す"""
        response = await focus_stub.Version(empty_pb2.Empty())
        assert response.version == TEST_VERSION

    @pytest.mark.asyncio
    async def test_try_version(self, client_config):
        """try_version() がバージョン文字列を返す"""
        assert await try_version(client_config) == TEST_VERSION


@pytest.mark.integration
class TestFocusRaise:
    """Raise() のテスト"""

    @pytest.mark.asyncio
    async def test_raise_returns_empty(self, focus_stub):
        response = await focus_stub.Raise(empty_pb2.Empty())
        assert response == empty_pb2.Empty()

    @pytest.mark.asyncio
    async def test_raise_wakes_waiter(self, focus_service, focus_stub):
        """Raise() が wait_for_raise() の待機を解除する"""
        waiter = asyncio.create_task(
            focus_service.servicer.wait_for_raise(timeout_sec=2.0)
        )
        await asyncio.sleep(0.05)
        await focus_stub.Raise(empty_pb2.Empty())
        await waiter
        assert focus_service.servicer.raise_count == 1

    @pytest.mark.asyncio
    async def test_try_raise_succeeds(self, focus_service, client_config):
        assert await try_raise(client_config) is True
        assert focus_service.servicer.raise_count == 1

    @pytest.mark.asyncio
    async def test_on_raise_callback(self, focus_config):
        """on_raise コールバックが呼ばれる"""
        calls = []
        service = FocusService(focus_config, "1.0.0", on_raise=lambda: calls.append(1))
        port = await service.start()
        try:
            assert await try_raise(FocusConfig(port=port, timeout_sec=2.0))
        finally:
            await service.stop(grace=0)
        assert calls == [1]


class TestFocusServicer:
    """Servicer のみのテスト（サーバー不要）"""

    @pytest.mark.asyncio
    async def test_wait_timeout_raises(self):
        servicer = FocusServicer("1.0.0")
        with pytest.raises(asyncio.TimeoutError):
            await servicer.wait_for_raise(timeout_sec=0.05)

    @pytest.mark.asyncio
    async def test_version_handler(self):
        servicer = FocusServicer("9.9.9")
        response = await servicer.Version(empty_pb2.Empty(), None)
        assert response.version == "9.9.9"

    @pytest.mark.asyncio
    async def test_raise_event_is_rearmed(self):
        """wait_for_raise() は 1 回の Raise ごとに 1 回だけ解除される"""
        servicer = FocusServicer("1.0.0")
        await servicer.Raise(empty_pb2.Empty(), None)
        await servicer.wait_for_raise(timeout_sec=0.5)
        with pytest.raises(asyncio.TimeoutError):
            await servicer.wait_for_raise(timeout_sec=0.05)


@pytest.mark.integration
class TestNoServer:
    """サーバーが起動していない場合"""

    @staticmethod
    async def _unused_port():
        service = FocusService(FocusConfig(port=0), "0")
        port = await service.start()
        await service.stop(grace=0)
        return port

    @pytest.mark.asyncio
    async def test_try_raise_returns_false(self):
        port = await self._unused_port()
        assert await try_raise(FocusConfig(port=port, timeout_sec=0.5)) is False

    @pytest.mark.asyncio
    async def test_try_version_raises(self):
        port = await self._unused_port()
        with pytest.raises(grpc.aio.AioRpcError):
            await try_version(FocusConfig(port=port, timeout_sec=0.5))


@pytest.mark.integration
class TestPortDiscovery:
    """ポートのフォールバックと discovery ファイル"""

    @pytest.mark.asyncio
    async def test_discovery_file_written(self, tmp_path):
        path = tmp_path / "focus" / "server.json"
        service = FocusService(FocusConfig(port=0, discovery_path=str(path)), "1.2.3")
        port = await service.start()
        try:
            assert json.loads(path.read_text()) == {"port": port}
            # クライアントは discovery ファイルのポートを優先する
            client_config = FocusConfig(port=1, discovery_path=str(path), timeout_sec=2.0)
            assert await try_version(client_config) == "1.2.3"
        finally:
            await service.stop(grace=0)

    @pytest.mark.asyncio
    async def test_busy_port_falls_back(self, focus_service):
        """使用中のポートでは別のポートで起動する"""
        second = FocusService(FocusConfig(port=focus_service.port), "2.0.0")
        port = await second.start()
        try:
            assert port != focus_service.port
            assert await try_version(FocusConfig(port=port, timeout_sec=2.0)) == "2.0.0"
        finally:
            await second.stop(grace=0)

    @pytest.mark.asyncio
    async def test_discovery_file_removed_on_stop(self, tmp_path):
        """停止後は discovery ファイルを削除し、設定ポートに戻る"""
        path = tmp_path / "server.json"
        service = FocusService(FocusConfig(port=0, discovery_path=str(path)), "1.2.3")
        await service.start()
        assert path.exists()
        await service.stop(grace=0)
        assert not path.exists()
        assert FocusConfig(port=1042, discovery_path=str(path)).target == "127.0.0.1:1042"
