def format_report(metrics, nodes, reach=None, origins=None):
    """
    Render the end-of-run propagation report.

    reach (optional) holds, per node, how many nodes are reachable from it;
    with origins (key -> origin node) it marks partial messages whose origin
    cannot reach the whole network.
    """
    lines = []
    lines.append("=== GOSSIP NETWORK SUMMARY ===")
    lines.append(f"Total messages mined across network: {metrics.total_mined}")
    lines.append("")
    lines.append("Messages mined by each node:")
    for node, count in sorted(metrics.mined_per_node.items()):
        lines.append(f"  Node {node}: {count}")
    lines.append("")
    lines.append(f"Unique messages observed in network: {metrics.unique_messages}")

    lines.append("")
    lines.append("=== PROPAGATION REPORT ===")
    for key in metrics.keys():
        n = metrics.receiver_count(key)
        hops = metrics.mean_hops(key)
        if metrics.is_fully_propagated(key):
            lines.append(f"[FULL]    {key} reached all {nodes} nodes (avg hops {hops:.2f})")
            continue
        note = ""
        if reach is not None and origins is not None and key in origins:
            ceiling = int(reach[origins[key]])
            if ceiling < nodes:
                note = f", origin reaches only {ceiling}"
        lines.append(f"[PARTIAL] {key} reached only {n}/{nodes} nodes (avg hops {hops:.2f}{note})")

    lines.append("")
    lines.append(f"Messages fully propagated: {metrics.fully_propagated_count()}")
    lines.append(f"Messages partially propagated: {metrics.partially_propagated_count()}")
    return "\n".join(lines)


def format_node_details(gossip_nodes):
    """Per-node neighbor lists and received messages."""
    lines = ["=== NODE DETAILS ==="]
    for g in gossip_nodes:
        lines.append(f"Neighbors of node {g.node_id}: {', '.join(str(p.node_id) for p in g.peers) or '-'}")
        lines.append(f"Node {g.node_id} received messages:")
        for key in sorted(g.received):
            lines.append(f"  - {key}")
    return "\n".join(lines)
