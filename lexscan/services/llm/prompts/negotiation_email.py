NEGOTIATION_EMAIL_USER = """\
On the basis of the contract's schema: {contract_schema},
Create a negotiation email (email format so add newlines wherever required) \
for the contract as per the tone provided: {tone}"""
