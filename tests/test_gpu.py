"""
Tests for the public list_devices / list_processes queries.

The tool invocation is stubbed; these tests cover decoding and mapping of
the tool output and the propagation of failures.
"""

from unittest.mock import patch

import pytest

from gputil import (
    ContextCancelledError,
    DeviceRecord,
    MalformedCsvError,
    ProcessExecutionError,
    ProcessRecord,
    QueryConfig,
    QueryContext,
    QueryKind,
    SchemaMismatchError,
    list_devices,
    list_processes,
)

CONFIG = QueryConfig(poll_interval_seconds=0.05)


@patch("gputil.gpu.run_query")
def test_list_devices(mock_run_query, device_csv):
    """The 8-row A800 sample yields 8 device records."""
    mock_run_query.return_value = device_csv

    devices = list_devices(QueryContext.background(), config=CONFIG)

    assert len(devices) == 8
    assert all(isinstance(d, DeviceRecord) for d in devices)
    assert {d.name for d in devices} == {"NVIDIA A800-SXM4-80GB"}
    assert devices[0].uuid == "GPU-fd189414-e0f6-58a0-7031-fefe0ce43b1d"
    assert devices[7].uuid == "GPU-349fa89c-151d-340e-c147-94506daf1357"


@patch("gputil.gpu.run_query")
def test_list_processes(mock_run_query, compute_csv):
    """The single compute sample yields one process record."""
    mock_run_query.return_value = compute_csv

    processes = list_processes(QueryContext.background(), config=CONFIG)

    assert len(processes) == 1
    assert isinstance(processes[0], ProcessRecord)
    assert processes[0].used_memory == "74736"
    assert processes[0].pid == "44141"


@patch("gputil.gpu.run_query")
def test_no_processes_running(mock_run_query):
    """Empty tool output means no compute processes."""
    mock_run_query.return_value = b""

    assert list_processes(QueryContext.background(), config=CONFIG) == []


@patch("gputil.gpu.run_query")
def test_selectors_and_query_kind_are_forwarded(mock_run_query, device_csv):
    mock_run_query.return_value = device_csv
    context = QueryContext.background()

    list_devices(context, "0", "1", config=CONFIG)

    mock_run_query.assert_called_once_with(context, QueryKind.DEVICES, ("0", "1"), CONFIG)


@patch("gputil.gpu.run_query")
def test_processes_use_process_query(mock_run_query):
    mock_run_query.return_value = b""

    list_processes(None, "GPU-abc", config=CONFIG)

    assert mock_run_query.call_args.args[1] is QueryKind.PROCESSES
    assert mock_run_query.call_args.args[2] == ("GPU-abc",)


@patch("gputil.gpu.run_query")
def test_default_context_uses_configured_timeout(mock_run_query):
    mock_run_query.return_value = b""

    list_devices(config=QueryConfig(timeout_seconds=30.0))

    context = mock_run_query.call_args.args[0]
    assert isinstance(context, QueryContext)
    assert 0 < context.remaining() <= 30.0


@patch("gputil.gpu.run_query")
def test_default_context_without_timeout(mock_run_query):
    mock_run_query.return_value = b""

    list_devices(config=QueryConfig(timeout_seconds=None))

    assert mock_run_query.call_args.args[0].remaining() is None


@patch("gputil.gpu.run_query")
def test_process_failure_propagates(mock_run_query):
    """A nonzero tool exit surfaces as ProcessExecutionError with no records."""
    mock_run_query.side_effect = ProcessExecutionError(
        ["nvidia-smi"], 9, "NVIDIA-SMI has failed because it couldn't communicate with the NVIDIA driver."
    )

    with pytest.raises(ProcessExecutionError) as exc_info:
        list_devices(QueryContext.background(), config=CONFIG)
    assert exc_info.value.exit_code == 9

    with pytest.raises(ProcessExecutionError):
        list_processes(QueryContext.background(), config=CONFIG)


@patch("gputil.gpu.run_query")
def test_cancellation_propagates(mock_run_query):
    mock_run_query.side_effect = ContextCancelledError("context deadline exceeded")

    with pytest.raises(ContextCancelledError):
        list_devices(QueryContext.background(), config=CONFIG)


@patch("gputil.gpu.run_query")
def test_malformed_output_propagates(mock_run_query):
    mock_run_query.return_value = b'0, "GPU-abc\n'

    with pytest.raises(MalformedCsvError):
        list_devices(QueryContext.background(), config=CONFIG)


@patch("gputil.gpu.run_query")
def test_process_output_is_not_a_device_schema(mock_run_query, compute_csv):
    mock_run_query.return_value = compute_csv

    with pytest.raises(SchemaMismatchError):
        list_devices(QueryContext.background(), config=CONFIG)
