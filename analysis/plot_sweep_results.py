import argparse
import pandas as pd
import matplotlib.pyplot as plt

ap = argparse.ArgumentParser()
ap.add_argument("--summaries", default="out_sweeps/all_summaries.csv",
                help="CSV written by tools/collect_summaries.py")
ap.add_argument("--out", default="out_sweeps/full_vs_nodes.png")
args = ap.parse_args()

df = pd.read_csv(args.summaries)
df = df[df["unique_messages"] > 0]
df["full_frac"] = df["fully_propagated"] / df["unique_messages"]

# Plot
plt.figure()
df.boxplot(column="full_frac", by="nodes")
plt.title("Fully propagated messages vs network size")
plt.suptitle("")
plt.xlabel("nodes")
plt.ylabel("Fraction fully propagated")
plt.tight_layout()
plt.savefig(args.out)
print(f"Saved {args.out}")
