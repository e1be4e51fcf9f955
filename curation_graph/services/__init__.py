"""
Services - graph access, identity checks, mutation and publication views

- neo4j_service: driver lifecycle and explicit transactions
- identity_checker: existence and reachability checks
- curation_service: every mutation (CurationService)
- publication_service: internal listings and portal views (PublicationService)
- metadata_fetcher / entity_disambiguator: collaborators called before a
  write transaction opens
"""
