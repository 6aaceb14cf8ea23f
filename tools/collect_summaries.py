"""Merge the summary.json of every run under a root folder into one CSV."""
import argparse, json
from pathlib import Path

import pandas as pd

LEAD_COLS = ["run", "nodes", "peers", "transport", "seed",
             "total_mined", "unique_messages", "fully_propagated", "partially_propagated"]


def load_summaries(root):
    rows = []
    for path in sorted(Path(root).glob("*/summary.json")):
        s = json.loads(path.read_text(encoding="utf-8"))
        mined = s.pop("mined_per_node", {})
        s["run"] = path.parent.name
        s["miners"] = len(mined)
        rows.append(s)
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    df["full_frac"] = df["fully_propagated"] / df["unique_messages"].where(df["unique_messages"] > 0)
    lead = [c for c in LEAD_COLS if c in df.columns]
    return df[lead + sorted(c for c in df.columns if c not in lead)]


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--root", required=True, help="Root folder containing run subfolders")
    ap.add_argument("--out", required=True, help="Output CSV path")
    args = ap.parse_args(argv)

    df = load_summaries(args.root)
    if df.empty:
        raise SystemExit(f"No summary.json found under {args.root}")

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False)
    print(f"Wrote {len(df)} rows to {out}")

if __name__ == "__main__":
    main()
