"""
Fixed GraphQL documents

Point lookups keyed by entity id. List queries are compiled by the query
builders instead.
"""

# Paymaster with its most recent pools, user operations and withdrawals
GET_PAYMASTER_WITH_RELATED = """
query GetPaymasterWithRelated($id: ID!, $poolsFirst: Int!, $transactionsFirst: Int!, $withdrawalsFirst: Int!) {
  paymasterContract(id: $id) {
    id
    contractType
    address
    network
    chainId
    totalUsersDeposit
    currentDeposit
    revenue
    deployedAtBlock
    deployedAtTransaction
    deployedAtTimestamp
    lastUpdatedBlock
    lastUpdatedTimestamp
    pools(first: $poolsFirst, orderBy: createdAtTimestamp, orderDirection: desc) {
      id
      poolId
      joiningFee
      memberCount
      totalDeposits
      createdAtTimestamp
    }
    userOperations(first: $transactionsFirst, orderBy: executedAtTimestamp, orderDirection: desc) {
      id
      userOpHash
      sender
      actualGasCost
      executedAtTimestamp
    }
    revenueWithdrawals(first: $withdrawalsFirst, orderBy: withdrawnAtTimestamp, orderDirection: desc) {
      id
      recipient
      amount
      withdrawnAtTimestamp
    }
  }
}
"""

# Pool with paymaster, recent members and root history
GET_POOL_DETAILS = """
query GetPoolDetails($id: ID!, $membersFirst: Int!, $rootsFirst: Int!) {
  pool(id: $id) {
    id
    poolId
    network
    chainId
    joiningFee
    totalDeposits
    memberCount
    currentMerkleRoot
    currentRootIndex
    rootHistoryCount
    createdAtBlock
    createdAtTransaction
    createdAtTimestamp
    lastUpdatedBlock
    lastUpdatedTimestamp
    paymaster {
      id
      contractType
      address
      network
    }
    members(first: $membersFirst, orderBy: addedAtTimestamp, orderDirection: desc) {
      id
      memberIndex
      identityCommitment
      merkleRootWhenAdded
      rootIndexWhenAdded
      addedAtTimestamp
      gasUsed
      nullifierUsed
      nullifier
    }
    merkleRoots(first: $rootsFirst, orderBy: createdAtTimestamp, orderDirection: desc) {
      id
      root
      rootIndex
      createdAtTimestamp
    }
  }
}
"""

# Root history in index order, for proof generation against a known root
GET_VALID_ROOT_INDICES = """
query GetValidRootIndices($id: ID!) {
  pool(id: $id) {
    id
    currentRootIndex
    rootHistoryCount
    merkleRoots(orderBy: rootIndex, orderDirection: asc) {
      id
      root
      rootIndex
      createdAtTimestamp
      createdAtBlock
    }
  }
}
"""
