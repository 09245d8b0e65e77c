import asyncio
import inspect

import pytest


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Run coroutine tests on a fresh event loop."""
    test_function = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_function):
        return None
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        sig = inspect.signature(test_function)
        kwargs = {k: v for k, v in pyfuncitem.funcargs.items() if k in sig.parameters}
        loop.run_until_complete(test_function(**kwargs))
    finally:
        # The builtin engine formats on the default executor.
        loop.run_until_complete(loop.shutdown_default_executor())
        loop.close()
        asyncio.set_event_loop(None)
    return True


def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: coroutine test run by the local pyfunc hook")
