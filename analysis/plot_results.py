import argparse, json, os
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

ap = argparse.ArgumentParser()
ap.add_argument("--run", default="out", help="Run directory written with --outdir")
args = ap.parse_args()

receipts = pd.read_csv(os.path.join(args.run, "receipts.csv"))
messages = pd.read_csv(os.path.join(args.run, "messages.csv"))
with open(os.path.join(args.run, "summary.json"), encoding="utf-8") as f:
    summary = json.load(f)

nodes = summary["nodes"]

# Coverage over time since mining, one line per message
first = receipts.groupby("key")["time"].transform("min")
receipts["since_mined"] = receipts["time"] - first
plt.figure()
for key, grp in receipts.sort_values("since_mined").groupby("key"):
    t = grp["since_mined"].to_numpy()
    plt.step(t, np.arange(1, len(t) + 1) / nodes, where="post", alpha=0.4, linewidth=0.8)
plt.title('Coverage after mining (receivers/nodes)')
plt.xlabel('Seconds since mined'); plt.ylabel('Coverage fraction'); plt.grid(True)
plt.tight_layout(); plt.savefig(os.path.join(args.run, 'coverage.png'), dpi=150)

# Hop count distribution
plt.figure()
hops = receipts.loc[receipts["hops"] > 0, "hops"]
plt.hist(hops, bins=np.arange(0.5, hops.max() + 1.5 if len(hops) else 1.5))
plt.title('Hop counts of received copies')
plt.xlabel('Hops'); plt.ylabel('# receipts'); plt.grid(True)
plt.tight_layout(); plt.savefig(os.path.join(args.run, 'hops.png'), dpi=150)

print(f"Saved plots: {args.run}/coverage.png, {args.run}/hops.png")
print("Fully propagated:", summary['fully_propagated'], "/", summary['unique_messages'],
      "| median time to full coverage:",
      float((messages["t_full"] - messages["t_mined"]).median()) if messages["full"].any() else None)
