"""
Layout Context

Responsibilities:
- Chooses target page count and skill-grid shape from the job count
- Turns one measurement pass into ordered layout blocks
- Simulates pagination in memory for a bullet allocation
- Searches for the per-job bullet counts that fill the target pages

Owns: Page budget, bullet allocation, danger-zone threshold
Never: Measures or renders anything itself (the backend does)
"""
