# ---
# jupyter:
#   jupytext:
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#   kernelspec:
#     display_name: Python 3
#     language: python
#     name: python3
# ---

# %% [markdown]
# # 01: Boring Stick Sheet
#
# This example walks through the whole drawing workflow:
#
# 1. **Build** borehole logs (from JSON or in memory)
# 2. **Allocate** room for descriptions that overflow their layer
# 3. **Preview** the relocated labels with matplotlib
# 4. **Write** every borehole to one DXF sheet
#
# **Modules**: `pyborelog.stratigraphy`, `pyborelog.layout`, `pyborelog.dxf`

# %%
from pyborelog.stratigraphy import BoreholeLogSet
from pyborelog.layout import allocate, label_placements
from pyborelog.dxf import generate_dxf
from pyborelog.visualization import plot_log, plot_allocation

# %% [markdown]
# ## 1. Borehole Records
#
# Two borings.  SP-01 has a thin layer with a long description, which
# cannot fit its 0.4 m interval; SP-02 has room everywhere.

# %%
records = [
    {
        "hole_id": "SP-01",
        "z": 731.2,
        "water_level": 2.3,
        "depths": [0, 1.5, 1.9, 4.0, 6.45],
        "geology": [
            "Argila siltosa, marrom",
            "Areia fina a média, pouco argilosa, com pedregulhos de quartzo, "
            "cinza clara a amarela",
            "Silte arenoso, micáceo, variegado",
            "Silte argiloso, rijo, vermelho",
        ],
        "interp": ["Aterro", "Solo residual", "Solo residual", None],
        "nspt": {"start_depth": 1, "interval": 1,
                 "values": ["3", "5", "8", "12", "21", "30/15"]},
    },
    {
        "hole_id": "SP-02",
        "max_depth": 5.2,
        "depths": [0, 2.0, 5.45],
        "geology": ["Areia fina", "Argila orgânica, preta"],
    },
]
logs = BoreholeLogSet.from_records(records)
print(logs)

# %% [markdown]
# ## 2. Space Allocation
#
# The overflowing layer borrows slack from its neighbours.  Depth lines
# whose boundary moved are drawn bent.

# %%
allocation = allocate(logs[0])
for cluster in allocation.clusters:
    print(cluster.layers, cluster.unchanged, round(cluster.needs_extra_space, 3))

for placement in label_placements(allocation.clusters):
    print(placement.layer_index, placement.original_depth,
          placement.corrected_depth, placement.bent)

# %% [markdown]
# ## 3. Preview

# %%
import matplotlib.pyplot as plt

fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 6))
plot_log(allocation, ax=ax1)
plot_allocation(allocation, ax=ax2)
plt.tight_layout()
plt.show()

# %% [markdown]
# ## 4. DXF Sheet

# %%
doc, report = generate_dxf(logs, "palitos.dxf")
print(f"{report.succeeded} of {report.total} boreholes drawn")

# %% [markdown]
# ## Key Takeaways
#
# - A description keeps its own interval unless it overflows; only then
#   is it merged with neighbours.
# - The track is stretched only when the neighbours' slack is not
#   enough.
# - A malformed borehole is reported by id and left off the sheet; the
#   other boreholes are still drawn.
