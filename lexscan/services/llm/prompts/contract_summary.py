CONTRACT_SUMMARY_SYSTEM = """You are a legal contract analysis assistant. \
Only use information present in the provided text. \
Respond strictly in valid JSON, without explanations, comments or markdown."""

CONTRACT_SUMMARY_USER = """\
Read the following legal contract text and extract the following:
- summary: a simple summary in plain English (string)
- parties: array of objects {{name, role}}
- dates: array of objects {{date (yyyy-mm-dd), desc}}
- financialTerms: array of objects {{amount, date (yyyy-mm-dd), desc}}
- obligations: array of objects {{name, role}}
- riskyClauses: array of objects {{clause, description, risk (low/medium/high only)}}
- riskScore: integer from 0 to 100
- type: one of NDA/Service Agreement/Licensing/Employment

Respond strictly in valid JSON (without explanations or extra comments).

Here is the contract:
{contract_text}"""
