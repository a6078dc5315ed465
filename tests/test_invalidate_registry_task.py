import asyncio
import logging

from collateral_reader.app.interface.tasks.multichain import invalidate_registry_task as task_module


class TestInvalidateRegistryTask:
    def test_memory_backend_warns_and_skips(self, caplog, monkeypatch):
        def fail_runtime(**kwargs):
            raise AssertionError("no runtime expected for the memory backend")

        monkeypatch.setattr(task_module, "task_runtime", fail_runtime)

        with caplog.at_level(logging.WARNING, logger=task_module.__name__):
            asyncio.run(task_module.invalidate_registry_task(backend="memory"))

        assert "nothing persisted to invalidate" in caplog.text
