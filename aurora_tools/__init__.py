"""
Aurora Model Tools

Requirements import and occurrence property reports for the Aurora
architecture model:
- Requirements spreadsheet import into a file-backed requirement set
- Occurrence number extraction across the component hierarchy
- Mass, cost and air resistance breakdown workbooks
- Checkbox dialog to pick which analyses to run
"""

__version__ = "1.0.0"
__author__ = "Aurora Team"
