import argparse
import gc
import json
import sys
import time
import tracemalloc
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from jsonsmith.services.json_engine import JSON_ENGINE  # noqa: E402


def _build_synthetic_payload(records: int) -> str:
    # Deterministic synthetic payload for repeatable local/CI perf checks.
    records = max(20, int(records))
    users = []
    for idx in range(records):
        users.append(
            {
                "id": idx,
                "name": f"User {idx}",
                "email": f"user{idx}@example.com",
                "stats": {"level": idx % 60, "xp": idx * 17},
                "flags": [idx % 2 == 0, idx % 3 == 0, idx % 5 == 0],
            }
        )
    return json.dumps({"users": users}, indent=2)


def _break_payload(payload_text: str) -> str:
    """Drop a member-separating comma near the middle to force diagnosis."""
    lines = payload_text.split("\n")
    candidates = [
        idx
        for idx in range(len(lines) - 1)
        if lines[idx].rstrip().endswith(",") and lines[idx + 1].strip().startswith('"')
    ]
    target = candidates[len(candidates) // 2]
    lines[target] = lines[target].rstrip().rstrip(",")
    return "\n".join(lines)


def _timed(fn, *args):
    start = time.perf_counter()
    result = fn(*args)
    return result, (time.perf_counter() - start) * 1000.0


def _run_once(valid_text: str, broken_text: str) -> dict:
    valid_result, valid_ms = _timed(JSON_ENGINE.validate, valid_text)
    broken_result, broken_ms = _timed(JSON_ENGINE.validate, broken_text)
    stats, stats_ms = _timed(JSON_ENGINE.get_stats, valid_text)
    _formatted, format_ms = _timed(JSON_ENGINE.format_json, valid_text)
    return {
        "valid_ok": bool(valid_result.valid),
        "broken_line": broken_result.error.line if broken_result.error else None,
        "keys": stats.keys,
        "validate_ms": valid_ms,
        "diagnose_ms": broken_ms,
        "stats_ms": stats_ms,
        "format_ms": format_ms,
    }


def _fmt_bytes(num_bytes: int) -> str:
    mib = float(num_bytes) / (1024.0 * 1024.0)
    return f"{mib:.2f} MiB"


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Timing smoke check for validation, diagnosis, stats and format."
    )
    parser.add_argument(
        "--input",
        type=Path,
        help="Path to a JSON file. If omitted, a synthetic payload is used.",
    )
    parser.add_argument("--synthetic-records", type=int, default=1000)
    parser.add_argument("--warmup", type=int, default=1)
    parser.add_argument("--iterations", type=int, default=5)
    # Strict gate exits non-zero when timing thresholds regress.
    parser.add_argument("--strict", action="store_true")
    parser.add_argument("--max-validate-ms", type=float, default=100.0)
    parser.add_argument("--max-diagnose-ms", type=float, default=250.0)
    parser.add_argument("--max-peak-mib", type=float, default=256.0)
    args = parser.parse_args()

    if args.input:
        if not args.input.exists():
            print(f"ERROR: input not found: {args.input}")
            return 2
        source = str(args.input)
        try:
            valid_text = args.input.read_text(encoding="utf-8-sig")
            valid_text = JSON_ENGINE.format_json(valid_text)
        except (OSError, ValueError) as exc:
            print(f"ERROR: failed to load input payload: {exc}")
            return 2
        if not JSON_ENGINE.validate(valid_text).valid:
            print("ERROR: input is not valid JSON")
            return 2
    else:
        source = f"synthetic:{max(20, int(args.synthetic_records))}"
        valid_text = _build_synthetic_payload(args.synthetic_records)
    try:
        broken_text = _break_payload(valid_text)
    except IndexError:
        print("ERROR: input has no comma-separated members to break")
        return 2

    iterations = max(1, int(args.iterations))
    warmup = max(0, int(args.warmup))
    samples = []
    peak_bytes = 0

    tracemalloc.start()
    try:
        for idx in range(warmup + iterations):
            gc.collect()
            metrics = _run_once(valid_text, broken_text)
            _current, peak_now = tracemalloc.get_traced_memory()
            peak_bytes = max(peak_bytes, peak_now)
            if idx >= warmup:
                samples.append(metrics)
    finally:
        tracemalloc.stop()

    avg_validate = sum(s["validate_ms"] for s in samples) / len(samples)
    avg_diagnose = sum(s["diagnose_ms"] for s in samples) / len(samples)
    avg_stats = sum(s["stats_ms"] for s in samples) / len(samples)
    avg_format = sum(s["format_ms"] for s in samples) / len(samples)

    print("perf_smoke summary")
    print(f"- source: {source}")
    print(f"- iterations: {iterations} (warmup={warmup})")
    print(f"- payload size: {len(valid_text):,} chars")
    print(f"- keys: {samples[-1]['keys']:,}")
    print(f"- diagnosed line: {samples[-1]['broken_line']}")
    print(f"- avg validate: {avg_validate:.2f} ms")
    print(f"- avg diagnose: {avg_diagnose:.2f} ms")
    print(f"- avg stats: {avg_stats:.2f} ms")
    print(f"- avg format: {avg_format:.2f} ms")
    print(f"- peak traced memory: {_fmt_bytes(peak_bytes)}")

    if not args.strict:
        return 0

    failures = []
    if not all(s["valid_ok"] for s in samples):
        failures.append("valid payload reported invalid")
    if any(s["broken_line"] is None for s in samples):
        failures.append("broken payload produced no diagnosis line")
    if avg_validate > float(args.max_validate_ms):
        failures.append(f"avg validate {avg_validate:.2f} ms > {args.max_validate_ms:.2f} ms")
    if avg_diagnose > float(args.max_diagnose_ms):
        failures.append(f"avg diagnose {avg_diagnose:.2f} ms > {args.max_diagnose_ms:.2f} ms")
    if peak_bytes > int(float(args.max_peak_mib) * 1024 * 1024):
        failures.append(f"peak traced memory {_fmt_bytes(peak_bytes)} > {args.max_peak_mib:.2f} MiB")

    if failures:
        print("perf_smoke strict gate: FAIL")
        for failure in failures:
            print(f"- {failure}")
        return 1

    print("perf_smoke strict gate: PASS")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
