"""
Question Paper Generation Pipeline
generation/

Steps:
1. Availability Index  — group the bank by unit and BTL level
2. Blueprint Builder   — paper type → unit ranges, BTL distribution → quota scheme
3. Selector            — constrained random draw of exactly six questions
4. Paper Assembler     — question projection + paper metadata
"""
