"""
Pytest configuration and shared fixtures for build trace analyzer tests.
"""
import json
import pytest


CLANG_MARKER = {
    "cat": "",
    "pid": 1,
    "tid": 0,
    "ts": 0,
    "ph": "M",
    "name": "process_name",
    "args": {"name": "clang"}
}


def _event(name, ts, dur, detail=None, tid=0):
    event = {"pid": 1, "tid": tid, "ph": "X", "ts": ts, "dur": dur, "name": name}
    if detail is not None:
        event["args"] = {"detail": detail}
    return event


def _trace(events, clang=True, **extra):
    trace_events = list(events)
    if clang:
        trace_events.append(dict(CLANG_MARKER))
    document = {"traceEvents": trace_events}
    document.update(extra)
    return document


@pytest.fixture
def trace_event():
    """Factory for one complete ('X') trace event."""
    return _event


@pytest.fixture
def make_trace():
    """Factory for a trace document; appends the clang marker unless clang=False."""
    return _trace


@pytest.fixture
def sample_trace():
    """
    One translation unit, events listed in clang's end-time order.

    ExecuteCompiler 0..10000
      Frontend 0..7000
        Source a.h 100..3100
          Source b.h 200..1200
          ParseClass Foo 1500..2000
        InstantiateFunction foo<int> 4000..5500
          InstantiateFunction bar<int> 4200..4800
        InstantiateClass std::vector<int> 6000..6800
      Backend 7000..10000
        OptModule main.cpp 7000..9500
          OptFunction _Z3foov 7100..8000
          OptFunction main 8100..8500
    """
    return _trace([
        _event("Source", 200, 1000, "include/b.h"),
        _event("ParseClass", 1500, 500, "Foo"),
        _event("Source", 100, 3000, "include/a.h"),
        _event("InstantiateFunction", 4200, 600, "bar<int>"),
        _event("InstantiateFunction", 4000, 1500, "foo<int>"),
        _event("InstantiateClass", 6000, 800, "std::vector<int>"),
        _event("Frontend", 0, 7000),
        _event("OptFunction", 7100, 900, "_Z3foov"),
        _event("OptFunction", 8100, 400, "main"),
        _event("OptModule", 7000, 2500, "main.cpp"),
        _event("Backend", 7000, 3000),
        _event("ExecuteCompiler", 0, 10000),
        _event("Total Frontend", 0, 7000, tid=1),
        _event("Total InstantiateFunction", 0, 2100, tid=2),
    ])


@pytest.fixture
def trace_file(tmp_path):
    """Write a trace document (dict or raw text) to a temporary file and return its path."""
    counter = {"n": 0}

    def _create_file(data, name=None):
        counter["n"] += 1
        file_path = tmp_path / (name or f"trace_{counter['n']}.json")
        with open(file_path, "w") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)
        return str(file_path)

    return _create_file
