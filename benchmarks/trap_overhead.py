#!/usr/bin/env python3
from __future__ import annotations

import argparse
import statistics
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "python"))

import lazyproxy  # noqa: E402
from lazyproxy import reflect  # noqa: E402


class _Record:
    def __init__(self) -> None:
        self.name = "record"
        self.size = 3


_OPERATIONS = {
    "get": lambda obj: obj.name,
    "own_keys": reflect.own_keys,
    "descriptor": lambda obj: reflect.get_own_property_descriptor(obj, "size"),
    "create": None,
}


def _run_once(operation: str, subject, repeat: int) -> float:
    if operation == "create":
        make = lazyproxy.make_object(_Record)
        start = time.perf_counter()
        for _ in range(repeat):
            make().name
        end = time.perf_counter()
    else:
        op = _OPERATIONS[operation]
        start = time.perf_counter()
        for _ in range(repeat):
            op(subject)
        end = time.perf_counter()
    return (end - start) * 1_000_000.0 / repeat


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Benchmark lazy proxy operations against the plain object.",
    )
    parser.add_argument("--iterations", type=int, default=30)
    parser.add_argument("--warmup", type=int, default=5)
    parser.add_argument("--repeat", type=int, default=1000)
    parser.add_argument(
        "--operation",
        choices=sorted(_OPERATIONS),
        default="get",
        help="Operation to time (default: get).",
    )
    parser.add_argument(
        "--direct",
        action="store_true",
        help="Time the operation on the plain object instead of a proxy.",
    )
    args = parser.parse_args(argv)

    if args.iterations <= 0:
        parser.error("--iterations must be positive")
    if args.warmup < 0:
        parser.error("--warmup cannot be negative")
    if args.repeat <= 0:
        parser.error("--repeat must be positive")
    if args.direct and args.operation == "create":
        parser.error("--direct does not apply to 'create'")

    subject = _Record() if args.direct else lazyproxy.make_object(_Record)()

    for _ in range(args.warmup):
        _run_once(args.operation, subject, args.repeat)

    samples: list[float] = []
    for _ in range(args.iterations):
        samples.append(_run_once(args.operation, subject, args.repeat))

    samples.sort()
    mean = statistics.fmean(samples)
    median = statistics.median(samples)
    if len(samples) > 1:
        p95 = statistics.quantiles(samples, n=20, method="inclusive")[18]
    else:
        p95 = samples[0]
    stdev = statistics.pstdev(samples)

    print(f"operation: {args.operation} ({'direct' if args.direct else 'proxy'})")
    print(f"warmup: {args.warmup} iterations: {args.iterations} repeat: {args.repeat}")
    print(f"mean: {mean:.3f} us")
    print(f"median: {median:.3f} us")
    print(f"p95: {p95:.3f} us")
    print(f"stdev: {stdev:.3f} us")
    print(f"min: {samples[0]:.3f} us")
    print(f"max: {samples[-1]:.3f} us")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
