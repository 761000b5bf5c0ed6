"""GraphQL documents for every supported query."""

from __future__ import annotations

_MEDIA_CONTENTS = """
      mediaContents {
        contentType
        captionText
        sourceUrl {
          url
        }
      }"""

_NEWS_ITEM_FIELDS = f"""
      id
      publishedAt
      dataProvider {{
        name
      }}
      contentBlocks {{
        title
        intro{_MEDIA_CONTENTS}
      }}"""

_EVENT_RECORD_FIELDS = f"""
      id
      title
      listDate
      category {{
        name
      }}
      addresses {{
        addition
        city
      }}{_MEDIA_CONTENTS}"""

_PLACE_FIELDS = f"""
      id
      name
      category {{
        name
      }}{_MEDIA_CONTENTS}"""

GET_NEWS_ITEMS = f"""
  query NewsItems($limit: Int, $offset: Int, $dataProvider: String) {{
    newsItems(limit: $limit, skip: $offset, dataProvider: $dataProvider) {{{_NEWS_ITEM_FIELDS}
    }}
  }}
"""

GET_NEWS_ITEMS_WITH_PROVIDERS = f"""
  query NewsItems($limit: Int, $offset: Int, $dataProvider: String) {{
    newsItems(limit: $limit, skip: $offset, dataProvider: $dataProvider) {{{_NEWS_ITEM_FIELDS}
    }}
    newsItemsDataProviders {{
      id
      name
    }}
  }}
"""

GET_MORE_NEWS_ITEMS = f"""
  query NewsItems($limit: Int, $offset: Int!, $dataProvider: String) {{
    newsItems(limit: $limit, skip: $offset, dataProvider: $dataProvider) {{{_NEWS_ITEM_FIELDS}
    }}
  }}
"""

GET_NEWS_ITEM = f"""
  query NewsItem($id: ID!) {{
    newsItem(id: $id) {{{_NEWS_ITEM_FIELDS}
      sourceUrl {{
        url
      }}
    }}
  }}
"""

GET_EVENT_RECORDS = f"""
  query EventRecords($limit: Int, $offset: Int, $order: EventRecordsOrder, $categoryId: ID) {{
    eventRecords(limit: $limit, skip: $offset, order: $order, categoryId: $categoryId) {{{_EVENT_RECORD_FIELDS}
    }}
  }}
"""

GET_EVENT_RECORDS_WITH_CATEGORIES = f"""
  query EventRecords($limit: Int, $offset: Int, $order: EventRecordsOrder, $categoryId: ID) {{
    eventRecords(limit: $limit, skip: $offset, order: $order, categoryId: $categoryId) {{{_EVENT_RECORD_FIELDS}
    }}
    eventRecordsCategories {{
      id
      name
    }}
  }}
"""

GET_MORE_EVENT_RECORDS = f"""
  query EventRecords($limit: Int, $offset: Int!, $order: EventRecordsOrder, $categoryId: ID) {{
    eventRecords(limit: $limit, skip: $offset, order: $order, categoryId: $categoryId) {{{_EVENT_RECORD_FIELDS}
    }}
  }}
"""

GET_EVENT_RECORD = f"""
  query EventRecord($id: ID!) {{
    eventRecord(id: $id) {{{_EVENT_RECORD_FIELDS}
      description
    }}
  }}
"""

GET_POINTS_OF_INTEREST = f"""
  query PointsOfInterest($limit: Int, $offset: Int, $category: String) {{
    pointsOfInterest(limit: $limit, skip: $offset, category: $category) {{{_PLACE_FIELDS}
    }}
  }}
"""

GET_MORE_POINTS_OF_INTEREST = f"""
  query PointsOfInterest($limit: Int, $offset: Int!, $category: String) {{
    pointsOfInterest(limit: $limit, skip: $offset, category: $category) {{{_PLACE_FIELDS}
    }}
  }}
"""

GET_POINT_OF_INTEREST = f"""
  query PointOfInterest($id: ID!) {{
    pointOfInterest(id: $id) {{{_PLACE_FIELDS}
      createdAt
      description
      dataProvider {{
        logo {{
          url
        }}
        name
      }}
    }}
  }}
"""

GET_TOURS = f"""
  query Tours($limit: Int, $offset: Int, $category: String) {{
    tours(limit: $limit, skip: $offset, category: $category) {{{_PLACE_FIELDS}
    }}
  }}
"""

GET_MORE_TOURS = f"""
  query Tours($limit: Int, $offset: Int!, $category: String) {{
    tours(limit: $limit, skip: $offset, category: $category) {{{_PLACE_FIELDS}
    }}
  }}
"""

GET_TOUR = f"""
  query Tour($id: ID!) {{
    tour(id: $id) {{{_PLACE_FIELDS}
      description
      lengthKm
    }}
  }}
"""

GET_CATEGORIES = """
  query Categories {
    categories {
      id
      name
      pointsOfInterestCount
      toursCount
    }
  }
"""

GET_POINTS_OF_INTEREST_AND_TOURS = f"""
  query PointsOfInterestAndTours($limit: Int, $orderPoi: PointsOfInterestOrder, $orderTour: ToursOrder) {{
    pointsOfInterest(limit: $limit, order: $orderPoi) {{{_PLACE_FIELDS}
    }}
    tours(limit: $limit, order: $orderTour) {{{_PLACE_FIELDS}
    }}
  }}
"""

GET_PUBLIC_JSON_FILE = """
  query PublicJsonFile($name: String!) {
    publicJsonFile(name: $name) {
      content
    }
  }
"""
