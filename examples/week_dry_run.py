"""Example: compute one week's Silverware totals without writing to Firestore.

Prerequisites:
- Set SILVERWARE_BASE_<KEY> / SILVERWARE_TOKEN_<KEY> for at least one location
  (keys default to beacon, tulia, prohibition, cesoir; see SILVERWARE_LOCATIONS)
- Optionally set SILVERWARE_TZ_OFFSET_MINUTES (e.g. -240 for EDT)
"""

import logging

from silverware_etl import RunSettings, load_locations_from_env, run_week

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

# Define the week (Monday) - MODIFY AS NEEDED
settings = RunSettings.from_env()
settings.week_of = "2025-10-06"
settings.dry_run = True

results = run_week(load_locations_from_env(), settings, db=None)

for r in results:
    if r.totals is not None:
        t = r.totals
        print(f"{r.location}: orders={t.orders} food=${t.food} voids=${t.voids} promos=${t.promos}")
    else:
        print(f"{r.location}: {r.status} {r.error or ''}")
