CHART_STYLE = {
    "lightning": {
        "size": {"width": 200, "height": 36},
        "ports": {
            "empty-left": "left",
            "empty-right": "right",
            "backend": "bottom",
        },
    },
    "bitcoin": {
        "size": {"width": 200, "height": 36},
        "ports": {
            "peer-left": "left",
            "peer-right": "right",
            "backend": "top",
        },
    },
}

# (from port, to port) used when a link is added without explicit ports
LINK_PORTS = {
    "backend": ("backend", "backend"),
    "pending-backend": ("backend", "backend"),
    "pending-channel": ("empty-right", "empty-left"),
    "open-channel": ("empty-right", "empty-left"),
}

LINK_LABELS = {
    "backend": "Chain Backend Connection",
    "pending-backend": "Chain Backend Connection",
    "pending-channel": "Pending Channel",
    "open-channel": "Lightning Channel",
}
