"""Post feed widgets: cards, date groups, workers and the management window."""
