"""GraphQL documents sent to the TryFi API."""

PETS_QUERY = """
query {
  currentUser {
    __typename
    id
    userHouseholds {
      __typename
      household {
        __typename
        pets {
          __typename
          id
          name
          breed {
            __typename
            id
            name
          }
          device {
            __typename
            id
            moduleId
            info
            operationParams {
              __typename
              mode
              ledEnabled
              ledOffAt
            }
            lastConnectionState {
              __typename
              date
              ... on ConnectedToUser {
                user {
                  __typename
                  id
                  firstName
                  lastName
                }
              }
              ... on ConnectedToBase {
                chargingBase {
                  __typename
                  id
                }
              }
              ... on ConnectedToCellular {
                signalStrengthPercent
              }
            }
          }
        }
      }
    }
  }
}
"""

# The pet id is inlined as a JSON string literal.
PET_LOCATION_QUERY = """
query {
  pet(id: %s) {
    ongoingActivity {
      __typename
      start
      areaName
      ... on OngoingWalk {
        positions {
          __typename
          date
          position {
            __typename
            latitude
            longitude
          }
        }
      }
      ... on OngoingRest {
        position {
          __typename
          latitude
          longitude
        }
        place {
          __typename
          id
          name
          address
        }
      }
    }
  }
}
"""

UPDATE_OPERATION_PARAMS_MUTATION = """
mutation UpdateDeviceOperationParams($input: UpdateDeviceOperationParamsInput!) {
  updateDeviceOperationParams(input: $input) {
    __typename
    id
    moduleId
    operationParams {
      __typename
      mode
      ledEnabled
      ledOffAt
    }
  }
}
"""
