import csv
import json
import math
import argparse
from pathlib import Path
from statistics import median

RECORD_FIELDS = ["dataset", "type", "title", "date", "url", "title_chars", "summary_chars", "has_date"]
TYPE_FIELDS = [
    "type", "records", "with_date", "with_summary",
    "median_summary_chars", "p90_summary_chars", "max_summary_chars",
]


def percentile(sorted_vals, p) -> float:
    if not sorted_vals:
        raise ValueError("Cannot calculate percentile of empty sequence")
    k = (len(sorted_vals) - 1) * (p / 100.0)
    f = math.floor(k)
    c = math.ceil(k)
    if f == c:
        return sorted_vals[int(k)]
    d0 = sorted_vals[f] * (c - k)
    d1 = sorted_vals[c] * (k - f)
    return d0 + d1


def iter_datasets(root: Path):
    yield from sorted(root.rglob("*.jsonl"))


def read_records(path: Path):
    """Yield (record, None) per good line and (None, line_no) per broken one."""
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                rec = json.loads(line)
            except json.JSONDecodeError:
                yield None, line_no
                continue
            if not isinstance(rec, dict):
                yield None, line_no
                continue
            yield rec, None


def scan(root: Path):
    """Per-record rows, per-type summary rows and the broken-line count for every dataset under root."""
    record_rows = []
    by_type = {}   # type -> list of record rows
    broken = 0

    for ds in iter_datasets(root):
        for rec, bad_line in read_records(ds):
            if rec is None:
                broken += 1
                continue
            ptype = rec.get("type") or "unknown"
            summary = rec.get("summary") or ""
            row = {
                "dataset": ds.relative_to(root).as_posix(),
                "type": ptype,
                "title": rec.get("title") or "",
                "date": rec.get("date") or "",
                "url": rec.get("url") or "",
                "title_chars": len(rec.get("title") or ""),
                "summary_chars": len(summary),
                "has_date": bool(rec.get("date")),
            }
            record_rows.append(row)
            by_type.setdefault(ptype, []).append(row)

    type_rows = []
    for ptype, rows in sorted(by_type.items(), key=lambda x: x[0].lower()):
        lens = sorted(r["summary_chars"] for r in rows)
        type_rows.append({
            "type": ptype,
            "records": len(rows),
            "with_date": sum(1 for r in rows if r["has_date"]),
            "with_summary": sum(1 for n in lens if n > 0),
            "median_summary_chars": int(median(lens)),
            "p90_summary_chars": int(percentile(lens, 90)),
            "max_summary_chars": lens[-1],
        })

    return record_rows, type_rows, broken


def write_csv(path: Path, fieldnames, rows):
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for r in rows:
            w.writerow(r)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Scan congress record datasets (JSONL) and compute per-type statistics.")
    ap.add_argument("--root", required=True, help="Directory holding the <run_id>.jsonl datasets.")
    ap.add_argument("--outdir", default="./dataset_stats", help="Directory to write CSV outputs.")
    ap.add_argument("--sample-n", type=int, default=0, help="If >0, print N sample records per type.")
    args = ap.parse_args(argv)

    root = Path(args.root).expanduser().resolve()
    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    record_rows, type_rows, broken = scan(root)

    records_csv = outdir / "records.csv"
    types_csv = outdir / "types.csv"
    write_csv(records_csv, RECORD_FIELDS, record_rows)
    write_csv(types_csv, TYPE_FIELDS, type_rows)

    # Console summary
    print("\n=== Dataset Scan Summary ===")
    print(f"Root: {root}")
    print(f"Records read: {len(record_rows)}")
    print(f"Broken lines (skipped): {broken}")
    print(f"Page types: {len(type_rows)}")
    for t in type_rows:
        print(f"- {t['type']}: records={t['records']} with_date={t['with_date']} with_summary={t['with_summary']}")
    print(f"Per-record CSV: {records_csv}")
    print(f"Per-type CSV: {types_csv}")

    if args.sample_n and args.sample_n > 0 and record_rows:
        print("\n=== Sample records per type ===")
        for t in type_rows:
            rows = [r for r in record_rows if r["type"] == t["type"]][:args.sample_n]
            print(f"\n[{t['type']}]")
            for rr in rows:
                print(f"  {rr['date'] or '-':<12} {rr['title'][:70]:<70}  {rr['url']}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
