CONTRACT_QNA_USER = """\
On the basis of the contract's schema: {contract_schema},
Answer the question as text.

Here is the question:
{question}"""
